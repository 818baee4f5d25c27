"""Конфигурация приложения: значения по умолчанию, загрузка JSON-конфига и настройка логирования."""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass(frozen=True)
class AppConfig:
    backend_url: str = "http://127.0.0.1:8000"
    request_timeout: float = 10.0
    source_image: Optional[Path] = None
    chart_width: int = 512
    chart_height: int = 200
    smoothing_radius: int = 2
    smoothing_iterations: int = 1
    max_smoothing_radius: int = 50
    max_workers: int = 4
    # отбрасывать результаты потока, если уже начался более новый (выкл.: побеждает последний ответ)
    discard_stale_responses: bool = False
    log_level: str = "INFO"
    log_file: Optional[Path] = None

    def __post_init__(self) -> None:
        if self.request_timeout <= 0:
            raise ValueError("request_timeout must be positive.")
        if self.chart_width <= 0 or self.chart_height <= 0:
            raise ValueError("chart_width and chart_height must be positive.")
        if self.smoothing_radius < 0 or self.smoothing_iterations < 0:
            raise ValueError("Smoothing parameters must be non-negative.")
        if not 0 <= self.smoothing_radius <= self.max_smoothing_radius:
            raise ValueError("smoothing_radius must not exceed max_smoothing_radius.")
        if self.max_smoothing_radius < 1:
            raise ValueError("max_smoothing_radius must be at least 1.")
        if self.max_workers < 1:
            raise ValueError("max_workers must be at least 1.")
        if logging.getLevelName(self.log_level.upper()) not in (
            logging.DEBUG, logging.INFO, logging.WARNING, logging.ERROR, logging.CRITICAL
        ):
            raise ValueError(f"Unknown log level: {self.log_level}")

    def with_overrides(self, **overrides: Any) -> "AppConfig":
        """Копия с применёнными переопределениями, отличными от None (CLI поверх файла)."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


_PATH_KEYS = {"source_image", "log_file"}


def load_config(config_file: Optional[Path] = None) -> AppConfig:
    """Загружает конфиг из JSON-объекта; отсутствующие ключи берутся по умолчанию.

    Args:
        config_file: Необязательный путь к JSON-файлу конфигурации.

    Returns:
        AppConfig со значениями из файла поверх значений по умолчанию.

    Raises:
        FileNotFoundError: если явно указанный файл не существует.
        ValueError: при некорректном JSON, неизвестных ключах или недопустимых значениях.
    """
    if config_file is None:
        return AppConfig()
    if not config_file.exists():
        raise FileNotFoundError(f"Config file not found: {config_file}")

    try:
        with config_file.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {config_file}: {e}") from e
    if not isinstance(data, dict):
        raise ValueError("Config file must contain a JSON object.")

    known = {f.name: f for f in fields(AppConfig)}
    unknown = sorted(set(data) - set(known))
    if unknown:
        raise ValueError(f"Unknown config keys: {', '.join(unknown)}")

    values: Dict[str, Any] = {}
    for key, value in data.items():
        if key in _PATH_KEYS:
            values[key] = Path(value) if value is not None else None
        elif key == "discard_stale_responses":
            if not isinstance(value, bool):
                raise ValueError(f"{key} must be true or false.")
            values[key] = value
        elif key in ("backend_url", "log_level"):
            values[key] = str(value)
        elif key == "request_timeout":
            values[key] = _coerce(key, value, float)
        else:
            values[key] = _coerce(key, value, int)
    return AppConfig(**values)


def _coerce(key: str, value: Any, ty: type) -> Any:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{key} must be a number, got {value!r}.")
    if ty is int and not float(value).is_integer():
        raise ValueError(f"{key} must be an integer, got {value!r}.")
    return ty(value)


def setup_logging(level: str = "INFO", log_file: Optional[Path] = None) -> None:
    """Логирование в консоль и, если задан `log_file`, ещё и в файл."""
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT, handlers=handlers, force=True)
    # отладочные строки по запросам пишут наши модули, а не urllib3
    logging.getLogger("urllib3").setLevel(logging.WARNING)
