# macocr/pages.py
from fastapi.responses import HTMLResponse, JSONResponse, Response

from .upload import UploadOutcome

_HEAD = """<head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{title}</title>
</head>"""

FORM_PAGE = """<!doctype html>
<html>
{head}
<body>
    <h1>macocr v{version}</h1>
    <form action="/upload" method="post" enctype="multipart/form-data">
        <label>
            Choose file:
            <input type="file" name="file" required>
        </label>
        <br><br>
        <input type="submit" value="Upload file">
    </form>
</body>
</html>
"""

RESULT_PAGE = """<!doctype html>
<html>
{head}
<body>
    <h1>{title}</h1>
    <pre>{text}</pre>
</body>
</html>
"""

ERROR_PAGE = """<!doctype html>
<html>
{head}
<body>
    <h1>{title}</h1>
</body>
</html>
"""


def escape_html(text: str) -> str:
    """Escape &, < and > only; the text lands inside <pre>, never an attribute."""
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def wants_json(accept: str) -> bool:
    return "application/json" in (accept or "")


def form_page(version: str) -> str:
    return FORM_PAGE.format(head=_HEAD.format(title="macocr"), version=version)


def outcome_page(outcome: UploadOutcome) -> str:
    if outcome.is_error:
        return ERROR_PAGE.format(head=_HEAD.format(title="Error"), title=outcome.title)
    return RESULT_PAGE.format(
        head=_HEAD.format(title="OCR Result"),
        title=outcome.title,
        text=escape_html(outcome.payload.ocr_result),
    )


def render_outcome(outcome: UploadOutcome, accept: str) -> Response:
    if wants_json(accept):
        return JSONResponse(outcome.payload.model_dump())
    return HTMLResponse(outcome_page(outcome))
