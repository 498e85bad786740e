import logging
import math
from dataclasses import dataclass, field, replace

from magnitude import compensated_divide, compensation_factor, order_of_magnitude
from scale_config import ScaleConfig
from scale_data import CoordinateScale, Interval, RoughScale, ScaleRequest

logger = logging.getLogger(__name__)


def snap_number(value: float, snap_values: tuple[float, ...]) -> float:
    """snap_values のうち value に最も近い値を選ぶ

    隣り合う値の中点以下なら小さい方を採用する。最後の値より大きければ最後の値。
    """
    following = snap_values[1:] + snap_values[-1:]
    for current, next_value in zip(snap_values, following):
        if value <= (current + next_value) / 2:
            return current
    return snap_values[-1]


def normalize_step(step: float, snap_values: tuple[float, ...]) -> float:
    """ステップを 1, 2, 5, 10 × 10^n のような切りのいい値に丸める"""
    magnitude = order_of_magnitude(step)
    return snap_number(step / magnitude, snap_values) * magnitude


def normalize_min(value: float, step: float, factor: float) -> float:
    """軸の最小値の決め方

    - step より大きい正の値: step の倍数に切り下げる
    - 負の値: 絶対値を step の倍数に切り上げる
    - それ以外(0以上 step 以下): 0 にする
    """
    fixed_step = step * factor

    if value > step:
        return math.floor((value * factor) / fixed_step) * fixed_step / factor
    if value < 0:
        return -(_ceil_steps(abs(value), factor, fixed_step) * fixed_step) / factor
    return 0.0


def _ceil_steps(value: float, factor: float, fixed_step: float) -> int:
    """value を含むのに必要なステップ数(切り上げ)"""
    steps = math.ceil((value * factor) / fixed_step)
    # 掛け算や割り算がアンダーフローして0になっても正の値は1ステップで含める
    if steps == 0 and value > 0:
        steps = 1
    return steps


def normalize_limit(min_value: float, max_value: float, step: float) -> Interval:
    """最小値と最大値を step の倍数に広げる

    例: max = 155, step = 10 -> max = 160
    """
    factor = compensation_factor(max_value, step)
    # min と max の桁が極端に違うと倍率を掛けた値が溢れる
    if not all(math.isfinite(v * factor) for v in (min_value, max_value, step)):
        factor = 1.0
    fixed_step = step * factor

    new_max = _ceil_steps(max_value, factor, fixed_step) * fixed_step / factor
    new_min = normalize_min(min_value, step, factor)

    return Interval(min=new_min, max=new_max)


def normalize_step_count(limit_size: float, step: float) -> float:
    """浮動小数点の誤差を抑えてステップ数を計算する"""
    return compensated_divide(limit_size, step)


def widen_degenerate_range(request: ScaleRequest) -> ScaleRequest:
    """min == max のとき、値の桁の分だけ max を広げる"""
    if request.min != request.max:
        return request

    widened_max = request.max + order_of_magnitude(request.max)
    logger.debug(
        "Degenerate range %s..%s widened to %s..%s",
        request.min,
        request.max,
        request.min,
        widened_max,
    )
    return replace(request, max=widened_max)


def make_rough_scale(request: ScaleRequest, pixels_per_step: float) -> RoughScale:
    """画素数からおおよそのステップを求める"""
    limit_size = abs(request.max - request.min)
    value_per_pixel = limit_size / request.offset_size

    step_count = request.step_count
    if step_count is None:
        step_count = math.ceil(request.offset_size / pixels_per_step)

    step = value_per_pixel * (request.offset_size / step_count)

    if request.minimum_step_size is not None and step < request.minimum_step_size:
        step = request.minimum_step_size
        step_count = limit_size / step

    return RoughScale(
        limit=Interval(min=request.min, max=request.max),
        step=step,
        step_count=step_count,
    )


def normalize_scale(rough: RoughScale, snap_values: tuple[float, ...]) -> CoordinateScale:
    step = normalize_step(rough.step, snap_values)
    limit = normalize_limit(rough.limit.min, rough.limit.max, step)
    step_count = normalize_step_count(limit.length, step)

    return CoordinateScale(limit=limit, step=step, step_count=step_count)


@dataclass(frozen=True)
class CoordinateScaleCalculator:
    """データの範囲と軸の長さから目盛りを計算する"""

    config: ScaleConfig = field(default_factory=ScaleConfig.default)

    def calculate(self, request: ScaleRequest) -> CoordinateScale:
        request = widen_degenerate_range(request)

        rough = make_rough_scale(request, self.config.pixels_per_step)
        logger.debug("Rough scale: %s", rough)

        scale = normalize_scale(rough, self.config.snap_values)
        logger.debug("Normalized scale: %s", scale)

        return scale


def calculate_coordinate_scale(
    min: float,
    max: float,
    offset_size: float,
    step_count: int | None = None,
    minimum_step_size: float | None = None,
    config: ScaleConfig | None = None,
) -> CoordinateScale:
    request = ScaleRequest(
        min=min,
        max=max,
        offset_size=offset_size,
        step_count=step_count,
        minimum_step_size=minimum_step_size,
    )
    calculator = CoordinateScaleCalculator(config or ScaleConfig.default())
    return calculator.calculate(request)
