# macocr/config.py
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .auth import AuthCredential, parse_auth

UPLOAD_DIR_NAME = "macocr_uploads"
MAX_BODY_SIZE = 100 * 1024 * 1024  # 100 MiB
DEFAULT_PORT = 8000
VERSION = "0.3.0"


def _get_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _get_float(name: str) -> Optional[float]:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return None
    try:
        value = float(raw)
    except ValueError:
        return None
    return value if value > 0 else None


def default_upload_dir() -> Path:
    return Path(tempfile.gettempdir()) / UPLOAD_DIR_NAME


@dataclass(frozen=True)
class Settings:
    # HTTP
    host: str
    port: int
    max_body_size: int

    # Uploads are written here and never cleaned up
    upload_dir: Path

    # None: no authentication
    auth: Optional[AuthCredential]

    # OCR
    ocr_engine: str  # auto | vision | paddle
    ocr_lang: str
    ocr_timeout_seconds: Optional[float]  # None: wait forever

    # General
    log_level: str

    @staticmethod
    def from_env() -> "Settings":
        upload_dir = (os.getenv("MACOCR_UPLOAD_DIR") or "").strip()
        return Settings(
            host=(os.getenv("MACOCR_HOST") or "0.0.0.0").strip(),
            port=_get_int("MACOCR_PORT", DEFAULT_PORT),
            max_body_size=MAX_BODY_SIZE,
            upload_dir=Path(upload_dir) if upload_dir else default_upload_dir(),
            auth=parse_auth((os.getenv("MACOCR_AUTH") or "").strip()),
            ocr_engine=(os.getenv("OCR_ENGINE") or "auto").strip().lower(),
            ocr_lang=(os.getenv("OCR_LANG") or "auto").strip(),
            ocr_timeout_seconds=_get_float("OCR_TIMEOUT_SECONDS"),
            log_level=(os.getenv("LOG_LEVEL") or "INFO").strip().upper(),
        )
