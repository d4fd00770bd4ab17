# macocr/deps.py
import sys
from functools import lru_cache

from fastapi import Request

from .config import Settings
from .ocr.base import OcrEngine


@lru_cache(maxsize=4)
def build_engine(engine_type: str = "auto", lang: str = "auto") -> OcrEngine:
    """
    Build an OCR engine (cached per engine/lang pair).
    - auto: Apple Vision on macOS, PaddleOCR elsewhere
    - vision / paddle: force one backend
    """
    engine_type = engine_type.lower()
    if engine_type == "auto":
        engine_type = "vision" if sys.platform == "darwin" else "paddle"

    if engine_type == "vision":
        from .ocr.vision_impl import VisionEngine

        return VisionEngine()
    if engine_type == "paddle":
        from .ocr.paddle_impl import PaddleEngine

        return PaddleEngine(lang=lang, use_gpu=False)
    raise NotImplementedError(f"OCR engine '{engine_type}' is not implemented yet")


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_engine(request: Request) -> OcrEngine:
    """The engine built at startup (or injected by create_app)."""
    return request.app.state.engine
