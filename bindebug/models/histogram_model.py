"""Модели производных данных бэкенда: гистограмма, точка разбиения, кластеры, сглаживание.

Принципы:
- Валидация и нормализация JSON-ответов живут в моделях (pydantic), а не в HTTP-клиенте.
- Значения живут до следующей мутации (смена ROI или сглаживания) и
  всегда запрашиваются заново перед перерисовкой.
"""
from __future__ import annotations

import logging
import math
from typing import Annotated, Any, List, Optional, Tuple

import numpy as np
from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, RootModel, TypeAdapter, field_validator, model_validator

logger = logging.getLogger(__name__)

BUCKET_COUNT = 256


def _integral_number(value: Any) -> int:
    """Целое число из JSON: допускается и целочисленный float (`3.0`), но не bool/строка."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"ожидалось целое число, получено {value!r}")
    if isinstance(value, float) and not value.is_integer():
        raise ValueError(f"ожидалось целое число, получено {value!r}")
    return int(value)


IntegralInt = Annotated[int, BeforeValidator(_integral_number)]

# `/dark_light_partition` отдаёт голое число
SPLIT_POINT = TypeAdapter(IntegralInt)


class Histogram(BaseModel):
    """Распределение интенсивностей внутри ROI, индекс = уровень 0..255.

    Принимает как `{"buckets": [...]}`, так и голый список из ответа `/histogram`.
    Короткий список дополняется нулями, длинный обрезается; отрицательные,
    NaN и бесконечные значения заменяются нулём.
    """
    model_config = ConfigDict(frozen=True)

    buckets: Tuple[float, ...]

    @model_validator(mode="before")
    @classmethod
    def _wrap_bare_list(cls, data: Any) -> Any:
        if isinstance(data, (list, tuple)):
            return {"buckets": data}
        return data

    @field_validator("buckets", mode="before")
    @classmethod
    def _normalize_buckets(cls, value: Any) -> Tuple[float, ...]:
        if not isinstance(value, (list, tuple)):
            raise ValueError(f"ожидался список, получено {type(value).__name__}")

        buckets: List[float] = []
        for item in value[:BUCKET_COUNT]:
            if isinstance(item, bool) or not isinstance(item, (int, float)):
                raise ValueError(f"нечисловое значение {item!r}")
            try:
                bucket = float(item)
            except OverflowError:
                raise ValueError(f"значение вне диапазона float: {item}") from None
            if not math.isfinite(bucket) or bucket < 0:
                bucket = 0.0
            buckets.append(bucket)

        if len(value) != BUCKET_COUNT:
            logger.warning(f"histogram has {len(value)} buckets, expected {BUCKET_COUNT}")
            buckets.extend([0.0] * (BUCKET_COUNT - len(buckets)))
        return tuple(buckets)

    def as_array(self) -> np.ndarray:
        return np.asarray(self.buckets, dtype=np.float64)

    @property
    def max_value(self) -> float:
        """Глобальный максимум по всем 256 корзинам (0.0 для пустой ROI)."""
        return float(max(self.buckets))

    def __getitem__(self, index: int) -> float:
        return self.buckets[index]


class ClusterRange(BaseModel):
    """Кластер — замкнутый интервал индексов корзин `[lo, hi]`."""
    model_config = ConfigDict(frozen=True)

    lo: IntegralInt = Field(..., ge=0, le=BUCKET_COUNT - 1)
    hi: IntegralInt = Field(..., ge=0, le=BUCKET_COUNT - 1)

    @model_validator(mode="before")
    @classmethod
    def _from_pair(cls, data: Any) -> Any:
        if isinstance(data, (list, tuple)):
            if len(data) != 2:
                raise ValueError(f"ожидалась пара [lo, hi], получено {list(data)!r}")
            return {"lo": data[0], "hi": data[1]}
        return data

    @model_validator(mode="after")
    def _check_order(self) -> "ClusterRange":
        if self.lo > self.hi:
            raise ValueError("hi must not be less than lo")
        return self

    def indices(self) -> range:
        return range(self.lo, self.hi + 1)


class ClusterList(RootModel[List[ClusterRange]]):
    """Ответ `/clusters` в порядке бэкенда.

    Пары с `lo > hi` и пары целиком вне 0..255 отбрасываются с предупреждением,
    остальные прижимаются к 0..255. Пересечения и порядок не проверяются.
    """

    @model_validator(mode="before")
    @classmethod
    def _clamp_and_drop(cls, data: Any) -> Any:
        if not isinstance(data, list):
            raise ValueError(f"ожидался список, получено {type(data).__name__}")

        pairs = []
        for item in data:
            if not isinstance(item, (list, tuple)) or len(item) != 2:
                raise ValueError(f"неверный элемент {item!r}, ожидалось [lo, hi]")
            lo, hi = _integral_number(item[0]), _integral_number(item[1])
            if lo > hi or hi < 0 or lo > BUCKET_COUNT - 1:
                logger.warning(f"clusters: dropping range {[lo, hi]} outside 0..{BUCKET_COUNT - 1}")
                continue
            pairs.append([max(0, lo), min(BUCKET_COUNT - 1, hi)])
        return pairs


class SmoothingParams(BaseModel):
    model_config = ConfigDict(frozen=True)

    radius: int = Field(..., ge=0)
    iterations: int = Field(..., ge=0)

    def as_query(self) -> dict:
        return {
            "smoothing_radius": self.radius,
            "smoothing_iterations": self.iterations,
        }


def parse_smoothing(radius: float, iterations_text: str) -> Optional[SmoothingParams]:
    """Собирает параметры из значения слайдера и текста поля «Итерации».

    Returns:
        `SmoothingParams` или None, если ввод некорректен (не целое или отрицательное).
    """
    try:
        return SmoothingParams(radius=int(round(radius)), iterations=int(iterations_text.strip()))
    except ValueError:
        return None


def resolve_smoothing(committed: SmoothingParams, radius: float, iterations_text: str) -> SmoothingParams:
    """Параметры, которые должна принять панель после правки слайдера или поля.

    Некорректный ввод откатывается к `committed`; вызывающий код оповещает
    подписчиков, только если результат отличается от `committed`.
    """
    params = parse_smoothing(radius, iterations_text)
    return committed if params is None else params
