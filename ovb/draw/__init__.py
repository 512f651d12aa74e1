
from .colors import Colors, GenomeColors, hex_to_rgb
from .format import format_position

__all__ = [
    "Colors", "GenomeColors", "hex_to_rgb",
    "format_position",
]
