# macocr/main.py
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import HTMLResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .auth import BasicAuthMiddleware
from .config import VERSION, Settings
from .deps import build_engine, get_engine, get_settings
from .limits import BodySizeLimitMiddleware
from .logger import Log
from .ocr.base import OcrEngine
from .pages import form_page, render_outcome
from .upload import UploadStore, first_field, process_upload


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    # startup failures here are fatal: uvicorn refuses to serve
    app.state.store.ensure_dir()
    if app.state.engine is None:
        app.state.engine = await run_in_threadpool(
            build_engine, settings.ocr_engine, settings.ocr_lang
        )
    Log.info(f"OCR engine: {app.state.engine.name}")
    yield


def create_app(settings: Optional[Settings] = None, engine: Optional[OcrEngine] = None) -> FastAPI:
    """
    Build the HTTP app. ``engine`` is normally None and built at startup from
    the settings; tests pass a stub instead.
    """
    settings = settings or Settings.from_env()

    app = FastAPI(title="macocr", version=VERSION, lifespan=lifespan)
    app.state.settings = settings
    app.state.engine = engine
    app.state.store = UploadStore(settings.upload_dir)

    # last added runs first: the size cap applies before (and without) auth
    if settings.auth is not None:
        app.add_middleware(BasicAuthMiddleware, credential=settings.auth)
    app.add_middleware(BodySizeLimitMiddleware, max_body_size=settings.max_body_size)

    @app.get("/", response_class=HTMLResponse)
    async def show_form():
        return form_page(VERSION)

    @app.get("/healthz")
    def healthz():
        return {"ok": True}

    @app.post("/upload")
    async def upload(
        request: Request,
        settings: Settings = Depends(get_settings),
        engine: OcrEngine = Depends(get_engine),
    ):
        """
        Single-file OCR upload (multipart, field "file").
        Responds with JSON when Accept mentions application/json, HTML otherwise.
        """
        accept = request.headers.get("accept", "")
        content_type = request.headers.get("content-type", "")
        try:
            if content_type.lower().startswith("multipart/form-data"):
                async with request.form() as form:
                    field = await first_field(form)
            else:
                Log.warning(f"Rejected non-multipart upload: {content_type or 'no content type'}")
                field = None
        except StarletteHTTPException as e:
            # bad multipart headers; anything else (413) goes up unchanged
            if e.status_code != 400:
                raise
            Log.warning(f"Rejected upload body: {e.detail}")
            field = None
        except ValueError as e:
            # python-multipart parse errors are ValueErrors
            Log.warning(f"Rejected upload body: {e}")
            field = None

        outcome = await process_upload(
            field,
            request.app.state.store,
            engine,
            timeout=settings.ocr_timeout_seconds,
        )
        return render_outcome(outcome, accept)

    return app


# local run: python -m macocr.main (the macocr CLI is the normal entry point)
if __name__ == "__main__":
    import uvicorn
    uvicorn.run("macocr.main:create_app", factory=True, host="0.0.0.0", port=8000)
