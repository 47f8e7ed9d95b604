"""Root landing page with API links."""

from html import escape

_STYLE = """
    body { font-family: system-ui, sans-serif; margin: 0; min-height: 100vh;
           background: #0b0b12; color: #e0e0e0; padding: 3rem 1rem; }
    .wrap { max-width: 560px; margin: 0 auto; text-align: center; }
    h1 { color: #fff; font-weight: 600; margin: 0 0 0.5rem 0; }
    p { color: #999; }
    code { background: #1b1b26; padding: 0.1rem 0.35rem; border-radius: 4px; }
    .btn { display: inline-block; margin: 1.5rem 0.4rem 0; padding: 0.6rem 1.2rem;
           border: 1px solid #667eea; border-radius: 6px; color: #fff; text-decoration: none; }
    .btn.primary { background: #667eea; }
"""


def render_root_page(app_name: str, app_version: str = "") -> str:
    """Return HTML for the root landing page."""
    name = escape(app_name)
    version = f" v{escape(app_version)}" if app_version else ""
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{name}</title>
    <style>{_STYLE}</style>
</head>
<body>
    <div class="wrap">
        <h1>{name}</h1>
        <p>Recruiting operations API{version}. Routes live under <code>/api/v1</code>.</p>
        <a href="/docs" class="btn primary">Open API docs (Swagger)</a>
        <a href="/redoc" class="btn">ReDoc</a>
    </div>
</body>
</html>
"""
