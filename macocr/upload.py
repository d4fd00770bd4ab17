# macocr/upload.py
import re
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

import anyio
import anyio.to_thread
from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel, Field
from starlette.datastructures import FormData, UploadFile

from .exceptions import UploadCreateError, UploadWriteError
from .logger import Log
from .ocr.assembler import assemble_result
from .ocr.base import OcrEngine, OcrResult
from .ocr.image import is_image_file

# (original file name, payload)
UploadField = Tuple[str, bytes]

_SAFE_SUFFIX = re.compile(r"^\.[A-Za-z0-9]{1,16}$")


class OcrBoxItem(BaseModel):
    text: str
    x: float
    y: float
    w: float
    h: float


class UploadResponse(BaseModel):
    success: bool
    message: str
    ocr_result: str = ""
    image_width: int = 0
    image_height: int = 0
    ocr_boxes: List[OcrBoxItem] = Field(default_factory=list)


@dataclass
class UploadOutcome:
    """
    Single result of an upload request, rendered once as JSON or HTML.
    ``is_error`` outcomes get the bare error page (no transcript block).
    """

    payload: UploadResponse
    title: str
    is_error: bool = False


def _error(message: str, title: str) -> UploadOutcome:
    return UploadOutcome(UploadResponse(success=False, message=message), title=title, is_error=True)


def _unsuccessful(message: str) -> UploadOutcome:
    return UploadOutcome(UploadResponse(success=False, message=message), title=f"❌ {message}")


NO_FILE = ("No file received", "❌ No file received")
NOT_AN_IMAGE = "The file type is not an image"


def _from_result(result: OcrResult) -> UploadOutcome:
    payload = UploadResponse(
        success=True,
        message="File uploaded successfully",
        ocr_result=result.text,
        image_width=result.image_width,
        image_height=result.image_height,
        ocr_boxes=[
            OcrBoxItem(text=line.text, x=line.box.x, y=line.box.y, w=line.box.w, h=line.box.h)
            for line in result.boxes
        ],
    )
    return UploadOutcome(payload, title="OCR Result:")


class UploadStore:
    """Writes uploads under randomized names into one shared directory."""

    def __init__(self, upload_dir: Path) -> None:
        self._upload_dir = upload_dir

    @property
    def upload_dir(self) -> Path:
        return self._upload_dir

    def ensure_dir(self) -> None:
        self._upload_dir.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def random_name(original_name: str) -> str:
        """uuid4 plus the original suffix (".png"), or the bare uuid."""
        suffix = Path(original_name).suffix
        if not _SAFE_SUFFIX.match(suffix):
            suffix = ""
        return f"{uuid.uuid4()}{suffix}"

    def save(self, data: bytes, original_name: str) -> Path:
        """
        Raises:
            UploadCreateError: the file could not be created. Exclusive
                create, so a uuid collision lands here instead of clobbering.
            UploadWriteError: the payload could not be written.
        """
        path = self._upload_dir / self.random_name(original_name)
        try:
            f = path.open("xb")
        except (OSError, ValueError) as e:
            raise UploadCreateError(f"Unable to create {path}: {e}") from e
        with f:
            try:
                f.write(data)
            except OSError as e:
                raise UploadWriteError(f"Failed to write {path}: {e}") from e
        return path


async def first_field(form: FormData) -> Optional[UploadField]:
    """(original_name, data) of the first form field; later fields are ignored."""
    items = form.multi_items()
    if not items:
        return None
    _, value = items[0]
    if isinstance(value, UploadFile):
        return value.filename or "unnamed", await value.read()
    return "unnamed", value.encode("utf-8")


def _recognize(path: Path, engine: OcrEngine) -> Optional[OcrResult]:
    """None when the stored file is not an image."""
    if not is_image_file(path):
        return None
    return assemble_result(path, engine)


async def process_upload(
    field: Optional[UploadField],
    store: UploadStore,
    engine: OcrEngine,
    timeout: Optional[float] = None,
) -> UploadOutcome:
    if field is None:
        return _error(*NO_FILE)
    original_name, data = field
    if not data:
        return _error(*NO_FILE)

    try:
        path = await run_in_threadpool(store.save, data, original_name)
    except UploadCreateError as e:
        Log.error(str(e))
        return _error("Unable to create file", "❌ Unable to create file.")
    except UploadWriteError as e:
        Log.error(str(e))
        return _error("Failed to write file", "❌ Failed to write file.")
    Log.info(f"Stored upload '{original_name}' ({len(data)} bytes) as {path.name}")

    try:
        # fail_after(None) never fires; a timed-out engine thread is abandoned, not killed
        with anyio.fail_after(timeout):
            result = await anyio.to_thread.run_sync(
                _recognize, path, engine, abandon_on_cancel=True
            )
    except TimeoutError:
        Log.warning(f"OCR on {path.name} timed out after {timeout}s")
        return _unsuccessful("Text recognition timed out")
    except OSError as e:
        Log.error(f"Could not read back {path}: {e}")
        return _unsuccessful("Unable to read uploaded file")

    if result is None:
        return _unsuccessful(NOT_AN_IMAGE)
    if result.engine_error is not None:
        return _unsuccessful("Text recognition failed")
    return _from_result(result)
