"""Volume pane - raw volume with the bar's direction for colouring."""

from typing import Dict, List, Sequence

from .base import Bar, VolumeConfig
from .registry import indicator


def volume_direction(bars: Sequence[Bar]) -> List[bool]:
    """True where the bar closed at or above its open."""
    return [bar.close >= bar.open for bar in bars]


@indicator("volume", "Volume")
def calculate_volume(bars: Sequence[Bar], config: VolumeConfig) -> Dict[str, List]:
    volume_field, direction_field = config.fields()
    return {
        volume_field: [bar.volume for bar in bars],
        direction_field: volume_direction(bars),
    }
