from dataclasses import dataclass


@dataclass(frozen=True)
class ScaleConfig:
    """目盛り計算の定数"""

    snap_values: tuple[float, ...] = (1, 2, 5, 10)
    """ステップの先頭桁として採用する値(昇順)"""

    pixels_per_step: float = 88.0
    """ステップ数の指定がないときの1目盛りあたりの画素数"""

    def __post_init__(self):
        if not self.snap_values:
            raise ValueError("snap_values must not be empty.")
        if any(v <= 0 for v in self.snap_values):
            raise ValueError("snap_values must be positive.")
        if any(a >= b for a, b in zip(self.snap_values, self.snap_values[1:])):
            raise ValueError("snap_values must be strictly ascending.")
        if self.pixels_per_step <= 0:
            raise ValueError("pixels_per_step must be positive.")

    @classmethod
    def default(cls) -> "ScaleConfig":
        """デフォルト設定を生成。"""
        return cls(snap_values=(1, 2, 5, 10), pixels_per_step=88.0)
