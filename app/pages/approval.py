"""HTML shown to the approver after following an approval link."""

from html import escape

_STYLE = """
    body { font-family: Arial, sans-serif; background: #f5f5f7; margin: 0; padding: 3rem 1rem; }
    .card { max-width: 520px; margin: 0 auto; background: #fff; border-radius: 8px;
            padding: 2rem; box-shadow: 0 2px 8px rgba(0,0,0,0.08); }
    h1 { margin-top: 0; font-size: 1.5rem; }
    .ok h1 { color: #1b873f; }
    .fail h1 { color: #b42318; }
    p { color: #444; line-height: 1.5; }
"""


def render_approval_page(title: str, message: str, *, success: bool) -> str:
    """Return a small standalone HTML page for the approve-by-token outcome."""
    status_class = "ok" if success else "fail"
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{escape(title)}</title>
    <style>{_STYLE}</style>
</head>
<body>
    <div class="card {status_class}">
        <h1>{escape(title)}</h1>
        <p>{escape(message)}</p>
    </div>
</body>
</html>
"""
