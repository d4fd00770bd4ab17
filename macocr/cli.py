# macocr/cli.py
from __future__ import annotations

import argparse
import dataclasses
import sys
from pathlib import Path
from typing import Optional

from .auth import parse_auth
from .config import VERSION, Settings
from .deps import build_engine
from .logger import Log
from .ocr.assembler import assemble_result
from .ocr.base import OcrEngine, OcrResult
from .ocr.image import is_image_file


def _port(value: str) -> int:
    try:
        port = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid port: {value!r}")
    if not 0 < port < 65536:
        raise argparse.ArgumentTypeError(f"port out of range: {port}")
    return port


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="macocr",
        description="OCR tool: print or export the text of images, or serve an upload endpoint.",
    )
    p.add_argument("files", nargs="*", help="Input files.")
    mode = p.add_mutually_exclusive_group()
    mode.add_argument(
        "-o",
        "--ocr",
        action="store_true",
        help="OCR and export text files (<stem>.txt next to each input).",
    )
    mode.add_argument("-s", "--server", action="store_true", help="Run HTTP server.")
    p.add_argument(
        "-a",
        "--auth",
        default="",
        help="HTTP Basic Auth (username:password). Ignored unless well-formed.",
    )
    p.add_argument(
        "-p",
        "--port",
        type=_port,
        default=None,
        help="HTTP port number (default: 8000).",
    )
    p.add_argument("--host", default=None, help="HTTP bind address (default: 0.0.0.0).")
    p.add_argument("-V", "--version", action="version", version=f"%(prog)s {VERSION}")
    return p


def _apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    changes = {}
    if args.port is not None:
        changes["port"] = args.port
    if args.host:
        changes["host"] = args.host
    if args.auth:
        changes["auth"] = parse_auth(args.auth)
    return dataclasses.replace(settings, **changes)


class BatchRunner:
    """Runs OCR over a list of paths; non-images are skipped silently."""

    def __init__(self, settings: Settings, engine: Optional[OcrEngine] = None) -> None:
        self._settings = settings
        self._engine = engine

    @property
    def engine(self) -> OcrEngine:
        # built on the first image so a run over non-images never loads a model
        if self._engine is None:
            self._engine = build_engine(self._settings.ocr_engine, self._settings.ocr_lang)
        return self._engine

    def recognize(self, file: str) -> Optional[OcrResult]:
        if not is_image_file(file):
            Log.debug(f"Skipping {file}: not an image")
            return None
        try:
            result = assemble_result(file, self.engine)
        except OSError as e:
            Log.debug(f"Skipping {file}: {e}")
            return None
        if result.engine_error is not None:
            return None
        return result

    def print_text(self, files: list[str]) -> None:
        for file in files:
            result = self.recognize(file)
            if result is not None:
                sys.stdout.write(result.text)
        sys.stdout.flush()

    def export_text(self, files: list[str]) -> None:
        for file in files:
            result = self.recognize(file)
            if result is None:
                continue
            text_file = Path(file).with_suffix(".txt")
            try:
                text_file.write_text(result.text, encoding="utf-8")
            except OSError as e:
                Log.error(f"Could not write {text_file}: {e}")
                continue
            print(f"{file} --> {text_file}")


def serve(settings: Settings) -> int:
    import uvicorn

    from .main import create_app

    app = create_app(settings)
    Log.info(f"   Address: http://{settings.host}:{settings.port}")
    Log.info(f"Upload dir: {settings.upload_dir}")
    if settings.auth is not None:
        Log.info(f"      Auth: {settings.auth.username} (basic)")
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)
    settings = _apply_overrides(Settings.from_env(), args)

    if args.server:
        Log.configure(settings.log_level)
        return serve(settings)

    # transcripts own stdout in batch mode
    Log.configure(settings.log_level, stream=sys.stderr)
    runner = BatchRunner(settings)
    if args.ocr:
        runner.export_text(args.files)
    else:
        runner.print_text(args.files)
    return 0


if __name__ == "__main__":
    sys.exit(main())
