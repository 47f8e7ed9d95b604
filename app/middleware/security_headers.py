"""Security headers middleware.

Adds security-related response headers. JSON responses get a deny-all CSP;
HTML pages (landing and approval result) may use inline styles only; the
interactive docs are left without a CSP so their assets load.
Raw ASGI.
"""

from typing import Callable

API_CSP = "default-src 'none'; frame-ancestors 'none'"
HTML_CSP = "default-src 'none'; style-src 'unsafe-inline'; frame-ancestors 'none'"
DOCS_PATH_PREFIXES = ("/docs", "/redoc", "/openapi.json")

DEFAULT_HEADERS = {
    "Strict-Transport-Security": "max-age=31536000; includeSubDomains",
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
    "Cache-Control": "no-store",
}


def _content_type(headers: list) -> bytes:
    for name, value in headers:
        if name.lower() == b"content-type":
            return value.lower()
    return b""


def SecurityHeadersMiddleware(
    app: Callable, headers: dict[str, str] | None = None
) -> Callable:
    """Set security headers on all HTTP responses without overriding ones already set."""
    resolved = headers if headers is not None else DEFAULT_HEADERS.copy()
    header_list = [(k.lower().encode(), v.encode()) for k, v in resolved.items()]

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return
        is_docs = scope.get("path", "").startswith(DOCS_PATH_PREFIXES)

        async def send_wrapper(message: dict) -> None:
            if message["type"] == "http.response.start":
                headers = list(message.get("headers", []))
                extra = list(header_list)
                if not is_docs:
                    csp = HTML_CSP if b"text/html" in _content_type(headers) else API_CSP
                    extra.append((b"content-security-policy", csp.encode()))
                seen = {h[0].lower() for h in headers}
                for name_b, value_b in extra:
                    if name_b not in seen:
                        headers.append((name_b, value_b))
                        seen.add(name_b)
                message["headers"] = headers
            await send(message)

        await app(scope, receive, send_wrapper)

    return asgi_app
