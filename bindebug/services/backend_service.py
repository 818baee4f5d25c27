"""HTTP-клиент пайплайна бинаризации.

Бэкенд хранит текущие ROI и параметры сглаживания на своей стороне; клиент
только отправляет мутации и читает производные данные. Пути эндпоинтов
зафиксированы для совместимости с существующим сервером.
"""
from __future__ import annotations

import logging
import time
from typing import Any, Callable, List, Optional, TypeVar

import requests
from pydantic import ValidationError

from bindebug.models.histogram_model import SPLIT_POINT, ClusterList, ClusterRange, Histogram, SmoothingParams
from bindebug.models.image_model import ImageData
from bindebug.models.selection_model import RoiRect
from bindebug.services.image_service import ImageService

logger = logging.getLogger(__name__)

T = TypeVar("T")


class BackendError(Exception):
    """Бэкенд ответил, но содержимое ответа нельзя использовать."""


def _cache_bust_token() -> int:
    return int(time.time() * 1000)


def _validate(path: str, validate: Callable[[Any], T], payload: Any) -> T:
    try:
        return validate(payload)
    except ValidationError as exc:
        raise BackendError(f"{path}: некорректный ответ ({exc.error_count()} ошибок): {exc}") from exc


def parse_histogram(payload: Any) -> Histogram:
    return _validate("/histogram", Histogram.model_validate, payload)


def parse_split_point(payload: Any) -> int:
    return _validate("/dark_light_partition", SPLIT_POINT.validate_python, payload)


def parse_clusters(payload: Any) -> List[ClusterRange]:
    return _validate("/clusters", ClusterList.model_validate, payload).root


class BackendService:
    """Тонкая обёртка над `requests.Session` для эндпоинтов пайплайна."""
    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
        image_service: Optional[ImageService] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._session = session if session is not None else requests.Session()
        self._image_service = image_service if image_service is not None else ImageService()

    # ---- Mutations ----
    def set_roi(self, roi: RoiRect) -> None:
        self._get("/set_roi", params=roi.as_query())

    def set_hist_smoothing(self, params: SmoothingParams) -> None:
        self._get("/set_hist_smoothing", params=params.as_query())

    # ---- Derived data ----
    def get_histogram(self) -> Histogram:
        return parse_histogram(self._get_json("/histogram"))

    def get_split_point(self) -> int:
        return parse_split_point(self._get_json("/dark_light_partition"))

    def get_clusters(self) -> List[ClusterRange]:
        return parse_clusters(self._get_json("/clusters"))

    def fetch_binarized_image(self) -> ImageData:
        return self._get_image("/binarized_image")

    def fetch_output_image(self) -> ImageData:
        return self._get_image("/image_output")

    def close(self) -> None:
        self._session.close()

    # ---- Helpers ----
    def _get(self, path: str, params: Optional[dict] = None) -> requests.Response:
        url = self._base_url + path
        logger.debug(f"GET {path} params={params}")
        response = self._session.get(url, params=params, timeout=self._timeout)
        response.raise_for_status()
        return response

    def _get_json(self, path: str) -> Any:
        response = self._get(path)
        try:
            return response.json()
        except ValueError as exc:
            raise BackendError(f"{path}: ответ не является JSON") from exc

    def _get_image(self, path: str) -> ImageData:
        # timestamp не даёт HTTP-кэшу вернуть изображение до мутации
        response = self._get(path, params={"timestamp": _cache_bust_token()})
        try:
            return self._image_service.decode_image(response.content, path)
        except ValueError as exc:
            raise BackendError(str(exc)) from exc
