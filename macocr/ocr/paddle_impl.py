# macocr/ocr/paddle_impl.py
import threading
from typing import TYPE_CHECKING, Any, Dict, List, Sequence

import numpy as np
import cv2

from .base import OcrEngine, OcrEngineError, Point, TextObservation

if TYPE_CHECKING:
    from paddleocr import PaddleOCR

# PaddleOCR has no language auto-detection; "ch" covers mixed Chinese/English.
_LANG_MAP = {
    "auto": "ch",
    "ch": "ch",
    "en": "en",
    "ch_en": "ch",
}


def _normalize_point(pt: Sequence[float], width: int, height: int) -> Point:
    """
    Pixel point (origin top-left) -> unit-square point (origin bottom-left).
    """
    return float(pt[0]) / width, 1.0 - float(pt[1]) / height


class PaddleEngine(OcrEngine):
    """
    Local OCR engine backed by PaddleOCR.

    - the configured language model is built up front, others lazily and cached
    - PaddleOCR predictors are not thread-safe: building and inference
      share one lock
    - angle classification on, so rotated lines are still read
    - pixel quads are normalized so the result matches the Vision engine
    """

    name = "paddle"

    def __init__(
        self,
        lang: str = "ch",
        use_gpu: bool = False,
        det_db_box_thresh: float = 0.45,
        det_db_unclip_ratio: float = 1.90,
        drop_score: float = 0.30,
        use_space_char: bool = True,
        max_text_length: int = 128,
    ):
        self._lang_key = _LANG_MAP.get(lang, "ch")
        self._use_gpu = use_gpu

        self._det_db_box_thresh = det_db_box_thresh
        self._det_db_unclip_ratio = det_db_unclip_ratio
        self._drop_score = drop_score
        self._use_space_char = use_space_char
        self._max_text_length = max_text_length

        self._engines: Dict[str, "PaddleOCR"] = {}
        self._lock = threading.Lock()

        # a missing paddleocr install fails here, not on the first request
        self._engines[self._lang_key] = self._build_engine(self._lang_key)

    def _build_engine(self, lang_key: str) -> "PaddleOCR":
        # first call downloads the models
        from paddleocr import PaddleOCR

        return PaddleOCR(
            use_angle_cls=True,
            lang=lang_key,
            show_log=False,
            use_gpu=self._use_gpu,
            det_db_box_thresh=self._det_db_box_thresh,
            det_db_unclip_ratio=self._det_db_unclip_ratio,
            use_space_char=self._use_space_char,
            drop_score=self._drop_score,
            max_text_length=self._max_text_length,
        )

    def _get_engine(self, lang_key: str) -> "PaddleOCR":
        if lang_key not in self._engines:
            self._engines[lang_key] = self._build_engine(lang_key)
        return self._engines[lang_key]

    def recognize(self, image_bytes: bytes) -> List[TextObservation]:
        img_array = np.frombuffer(image_bytes, dtype=np.uint8)
        # imdecode asserts on an empty buffer instead of returning None
        img = cv2.imdecode(img_array, cv2.IMREAD_COLOR) if img_array.size else None
        if img is None:
            raise OcrEngineError("Failed to decode image bytes. Unsupported or corrupted image data.")
        height, width = img.shape[:2]

        try:
            # list[ page -> list[ (boxPts, (text, score)) ] ], page is None when empty
            with self._lock:
                ocr_out: Any = self._get_engine(self._lang_key).ocr(img, cls=True)
        except Exception as e:
            raise OcrEngineError(f"PaddleOCR failed: {e!s}") from e

        observations: List[TextObservation] = []
        for page in ocr_out or []:
            for box_pts, (text, score) in page or []:
                # PaddleOCR quads are clockwise from top-left
                tl, tr, br, bl = (_normalize_point(p, width, height) for p in box_pts)
                observations.append(
                    TextObservation(
                        text=text,
                        confidence=float(score),
                        top_left=tl,
                        top_right=tr,
                        bottom_right=br,
                        bottom_left=bl,
                    )
                )
        return observations
