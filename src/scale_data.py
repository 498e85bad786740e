import math
from dataclasses import dataclass
from typing import Protocol

import numpy as np

# 目盛り位置の判定で許容する誤差(ステップ単位)
_TICK_TOLERANCE = 1e-9


def _check_finite(name: str, value: float) -> None:
    if not math.isfinite(value):
        raise ValueError(f"{name} must be a finite number, got {value}.")


@dataclass(frozen=True)
class Interval:
    """数直線上の閉区間"""

    min: float
    max: float

    def __post_init__(self):
        if self.min > self.max:
            raise ValueError("Interval min cannot be greater than max.")

    @property
    def length(self) -> float:
        return self.max - self.min

    def contains(self, value: float) -> bool:
        return self.min <= value <= self.max


@dataclass(frozen=True)
class ScaleRequest:
    """目盛り計算の入力

    min, max はデータの範囲、offset_size は軸に使える長さ(px)。
    """

    min: float
    max: float
    offset_size: float
    step_count: int | None = None
    minimum_step_size: float | None = None

    def __post_init__(self):
        _check_finite("min", self.min)
        _check_finite("max", self.max)
        _check_finite("offset_size", self.offset_size)

        if self.min > self.max:
            raise ValueError(
                f"min ({self.min}) cannot be greater than max ({self.max})."
            )
        if not math.isfinite(self.max - self.min):
            raise ValueError(
                f"Range {self.min}..{self.max} is too wide to calculate a scale."
            )
        if self.offset_size <= 0:
            raise ValueError(f"offset_size must be positive, got {self.offset_size}.")

        if self.step_count is not None:
            _check_finite("step_count", self.step_count)
            if self.step_count <= 0 or not float(self.step_count).is_integer():
                raise ValueError(
                    f"step_count must be a positive integer, got {self.step_count}."
                )

        if self.minimum_step_size is not None:
            _check_finite("minimum_step_size", self.minimum_step_size)
            if self.minimum_step_size <= 0:
                raise ValueError(
                    f"minimum_step_size must be positive, got {self.minimum_step_size}."
                )


@dataclass(frozen=True)
class RoughScale:
    """丸める前の目盛り"""

    limit: Interval
    step: float
    step_count: float


class Ticker(Protocol):
    """目盛りの値を計算する"""

    def get_ticks(self, interval: Interval) -> np.ndarray: ...


@dataclass(frozen=True)
class StepTicker:
    """一定間隔の目盛り"""

    step: float
    offset: float = 0.0

    def __post_init__(self):
        if self.step <= 0:
            raise ValueError("StepTicker step must be positive.")

    def get_ticks(self, interval: Interval) -> np.ndarray:
        # 値を足し合わせると誤差で端の目盛りが落ちるので、番号から計算する
        start_n = np.ceil((interval.min - self.offset) / self.step - _TICK_TOLERANCE)
        end_n = np.floor((interval.max - self.offset) / self.step + _TICK_TOLERANCE)

        if start_n > end_n:
            return np.array([])

        return self.offset + np.arange(start_n, end_n + 1) * self.step


@dataclass(frozen=True)
class CoordinateScale:
    """軸の目盛り(計算結果)"""

    limit: Interval
    step: float
    step_count: float

    @property
    def tick_count(self) -> int:
        """目盛りの間隔の数"""
        return round(self.step_count)

    def ticker(self) -> Ticker:
        """limit の目盛りを計算する Ticker"""
        return StepTicker(step=self.step)

    def tick_values(self) -> np.ndarray:
        """limit.min から limit.max までの目盛りの値"""
        return self.ticker().get_ticks(self.limit)

    def to_dict(self) -> dict:
        return {
            "limit": {"min": self.limit.min, "max": self.limit.max},
            "step": self.step,
            "stepCount": self.step_count,
        }
