import re
from typing import Optional, Tuple

from ovb.core.schema import Feature, FeatureType


class Colors:
    """ANSI escape codes for the text canvas."""

    RESET = '\x1b[0m'

    _color_frm_8b = '\x1b[{b_or_f};5;{c}m'
    _color_frm_24b = '\x1b[{b_or_f};2;{c[0]};{c[1]};{c[2]}m'

    _fgi = 38
    _bgi = 48

    @classmethod
    def get_color(cls, color_spec, background=False):
        """ANSI code for an 8-bit int, an (r, g, b) tuple or a '#rrggbb' string."""
        if isinstance(color_spec, int):
            return cls._color_frm_8b.format(b_or_f=cls._bgi if background else cls._fgi, c=color_spec)
        elif isinstance(color_spec, (list, tuple)) and len(color_spec) == 3:
            return cls._color_frm_24b.format(b_or_f=cls._bgi if background else cls._fgi, c=color_spec)
        elif isinstance(color_spec, str):
            rgb = hex_to_rgb(color_spec)
            if rgb is not None:
                return cls._color_frm_24b.format(b_or_f=cls._bgi if background else cls._fgi, c=rgb)
        return ""


_HEX_RE = re.compile(r"^#?([0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")


def hex_to_rgb(color: str) -> Optional[Tuple[int, int, int]]:
    m = _HEX_RE.match(color.strip())
    if m is None:
        return None
    digits = m.group(1)
    if len(digits) == 3:
        digits = "".join(c * 2 for c in digits)
    return (int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16))


class GenomeColors:
    """Canvas colour scheme (CSS hex strings)."""
    # Variant colors
    SNP = "#dc322f"        # Red
    INSERTION = "#859900"  # Green
    DELETION = "#b58900"   # Yellow/Orange

    # Feature colors
    GENE = "#00008b"       # Dark blue
    EXON = "#2aa198"       # Cyan
    COVERAGE = "#586e75"   # Gray
    SV = "#d33682"         # Magenta

    DEFAULT = "#268bd2"
    TEXT = "#000000"
    AXIS = "#333333"

    _variant_colors = {
        "SNP": SNP,
        "SNV": SNP,
        "INS": INSERTION,
        "DEL": DELETION,
    }

    _type_colors = {
        FeatureType.GENE: GENE,
        FeatureType.EXON: EXON,
        FeatureType.COVERAGE: COVERAGE,
        FeatureType.SV: SV,
    }

    @classmethod
    def get_feature_color(cls, feature: Feature) -> str:
        if feature.type == FeatureType.VARIANT:
            return cls._variant_colors.get((feature.sub_type or "").upper(), cls.DEFAULT)
        return cls._type_colors.get(feature.type, cls.DEFAULT)
