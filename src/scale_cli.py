import argparse
import json
import logging
import sys
from pathlib import Path

import numpy as np

from scale_calculator import CoordinateScaleCalculator
from scale_config import ScaleConfig
from scale_data import CoordinateScale, Interval, ScaleRequest

logger = logging.getLogger(__name__)

DELIMITERS = {
    "tab": "\t",
    "space": " ",
    "comma": ",",
    "semicolon": ";",
}


def parse_data(data_text: str, column: int, delimiter: str) -> np.ndarray:
    """データテキストから指定した列の数値を読み取る

    Returns:
        np.ndarray: 読み取れた値の配列
    """
    values: list[float] = []

    if not data_text:
        return np.array([], dtype=float)

    # エスケープされた改行を実際の改行に変換
    data_text = data_text.replace("\\n", "\n").replace("\\t", "\t")

    delim = DELIMITERS.get(delimiter, "\t")

    for line in data_text.split("\n"):
        line = line.strip()
        # コメント行をスキップ
        if not line or line.startswith("#"):
            continue

        if delim == " ":
            cols = line.split()  # 連続スペースを1つの区切りとして扱う
        else:
            cols = line.split(delim)

        try:
            values.append(float(cols[column]))
        except (ValueError, IndexError):
            continue  # パースエラーはスキップ

    return np.asarray(values, dtype=float)


def data_range(values: np.ndarray) -> Interval:
    """値の最小値と最大値"""
    finite = values[np.isfinite(values)]
    if finite.size == 0:
        raise ValueError("No numeric values found in data.")
    return Interval(min=float(finite.min()), max=float(finite.max()))


def format_scale(scale: CoordinateScale, format_string: str) -> str:
    lines = [
        f"min: {scale.limit.min}",
        f"max: {scale.limit.max}",
        f"step: {scale.step}",
        f"step count: {scale.step_count}",
        "ticks: " + ", ".join(format_string.format(float(v)) for v in scale.tick_values()),
    ]
    return "\n".join(lines)


def build_parser() -> argparse.ArgumentParser:
    pars = argparse.ArgumentParser(
        prog="coordinate-scale",
        description="Calculate nice axis limits and ticks for a data range.",
    )

    # Range
    pars.add_argument("--min", type=float, default=None)
    pars.add_argument("--max", type=float, default=None)

    # Data
    pars.add_argument("--data_text", type=str, default="")
    pars.add_argument("--data_file", type=Path, default=None)
    pars.add_argument("--data_delim", type=str, default="tab", choices=list(DELIMITERS))
    pars.add_argument("--column", type=int, default=1)

    # Scale
    pars.add_argument("--offset_size", type=float, required=True)
    pars.add_argument("--step_count", type=int, default=None)
    pars.add_argument("--minimum_step_size", type=float, default=None)
    pars.add_argument(
        "--pixels_per_step", type=float, default=ScaleConfig.default().pixels_per_step
    )

    # Output
    pars.add_argument("--format", type=str, default="{:.2f}")
    pars.add_argument("--json", action="store_true")
    pars.add_argument("--verbose", action="store_true")

    return pars


def _resolve_range(options: argparse.Namespace) -> Interval:
    """コマンドライン引数から範囲を決める"""
    if (options.min is None) != (options.max is None):
        raise ValueError("--min and --max must be given together.")
    if options.min is not None:
        return Interval(min=options.min, max=options.max)

    if options.column < 1:
        raise ValueError(f"--column must be 1 or greater, got {options.column}.")

    data_text = options.data_text
    if options.data_file is not None:
        data_text = options.data_file.read_text(encoding="utf-8")

    if not data_text:
        raise ValueError("Either --min and --max, or --data_text/--data_file is required.")

    values = parse_data(data_text.strip(), options.column - 1, options.data_delim)
    return data_range(values)


def main(argv: list[str] | None = None) -> int:
    options = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if options.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        interval = _resolve_range(options)
        config = ScaleConfig(pixels_per_step=options.pixels_per_step)
        request = ScaleRequest(
            min=interval.min,
            max=interval.max,
            offset_size=options.offset_size,
            step_count=options.step_count,
            minimum_step_size=options.minimum_step_size,
        )
        scale = CoordinateScaleCalculator(config).calculate(request)
    except (ValueError, OSError) as e:
        logger.error("Error: %s", e)
        return 2

    if options.json:
        print(json.dumps(scale.to_dict()))
    else:
        print(format_scale(scale, options.format))
    return 0


if __name__ == "__main__":
    sys.exit(main())
