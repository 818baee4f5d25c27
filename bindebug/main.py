"""Точка входа в приложение."""
import argparse
import logging
from pathlib import Path
from typing import List, Optional

from bindebug.config import AppConfig, load_config, setup_logging
from bindebug.services.image_service import ImageService

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Разбирает аргументы командной строки."""
    parser = argparse.ArgumentParser(
        description="Interactive debugger for the image binarization pipeline."
    )
    parser.add_argument(
        "image",
        type=Path,
        nargs="?",
        help="Source image shown for ROI selection (overrides source_image from the config).",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Optional JSON config file; command-line options take precedence.",
    )
    parser.add_argument(
        "--backend-url",
        help="Base URL of the binarization backend, e.g. http://127.0.0.1:8000.",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        dest="request_timeout",
        help="Per-request timeout in seconds.",
    )
    parser.add_argument(
        "--discard-stale",
        action="store_true",
        default=None,
        dest="discard_stale_responses",
        help="Ignore late results of an update once a newer update has started.",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity.",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        help="Also write logs to this file.",
    )
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> AppConfig:
    return load_config(args.config).with_overrides(
        source_image=args.image,
        backend_url=args.backend_url,
        request_timeout=args.request_timeout,
        discard_stale_responses=args.discard_stale_responses,
        log_level=args.log_level,
        log_file=args.log_file,
    )


def main(argv: Optional[List[str]] = None) -> None:
    """Создаёт и запускает главное окно приложения."""
    args = parse_args(argv)
    try:
        config = build_config(args)
    except (FileNotFoundError, ValueError) as e:
        raise SystemExit(f"error: {e}")
    setup_logging(config.log_level, config.log_file)

    if config.source_image is None:
        raise SystemExit("error: no source image given (positional argument or source_image in config)")
    try:
        source = ImageService().load_image(config.source_image)
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"Cannot load source image: {e}")
        raise SystemExit(2)

    logger.info(f"Backend: {config.backend_url}, source: {source.source} ({source.width}x{source.height})")

    # UI импортируется лениво: разбор аргументов работает и без дисплея
    from bindebug.app import BinarizationDebugApp

    app = BinarizationDebugApp(config, source)
    app.mainloop()


if __name__ == "__main__":
    main()
