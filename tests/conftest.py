import io
from pathlib import Path
from typing import List

import pytest
from PIL import Image

from macocr.config import MAX_BODY_SIZE, Settings
from macocr.ocr.base import TextObservation
from tests.stubs import StubEngine, make_observation


def _image_bytes(fmt: str, size=(100, 200)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", size, color=(255, 255, 255)).save(buf, format=fmt)
    return buf.getvalue()


@pytest.fixture()
def png_bytes() -> bytes:
    """100x200 white PNG."""
    return _image_bytes("PNG")


@pytest.fixture()
def jpeg_bytes() -> bytes:
    return _image_bytes("JPEG")


@pytest.fixture()
def two_lines() -> List[TextObservation]:
    return [
        make_observation("Hello", 0.1, 0.8, 0.6, 0.9),
        make_observation("World", 0.1, 0.6, 0.5, 0.7),
    ]


@pytest.fixture()
def stub_engine(two_lines: List[TextObservation]) -> StubEngine:
    return StubEngine(two_lines)


@pytest.fixture()
def upload_dir(tmp_path: Path) -> Path:
    return tmp_path / "uploads"


@pytest.fixture()
def settings(upload_dir: Path) -> Settings:
    return Settings(
        host="127.0.0.1",
        port=8000,
        max_body_size=MAX_BODY_SIZE,
        upload_dir=upload_dir,
        auth=None,
        ocr_engine="stub",
        ocr_lang="auto",
        ocr_timeout_seconds=None,
        log_level="INFO",
    )
