from __future__ import annotations

import pytest

from ovb.core.schema import Feature, FeatureType
from ovb.draw.colors import Colors, GenomeColors, hex_to_rgb
from ovb.draw.format import format_position


@pytest.mark.parametrize("spec, rgb", [("#dc322f", (220, 50, 47)), ("fff", (255, 255, 255)), ("nope", None)])
def test_hex_to_rgb(spec, rgb) -> None:
    assert hex_to_rgb(spec) == rgb


def test_ansi_codes() -> None:
    assert Colors.get_color(196) == "\x1b[38;5;196m"
    assert Colors.get_color((1, 2, 3), background=True) == "\x1b[48;2;1;2;3m"
    assert Colors.get_color("not a color") == ""
    assert Colors.get_color("#000") == "\x1b[38;2;0;0;0m"


@pytest.mark.parametrize("type_, sub_type, color", [
    (FeatureType.VARIANT, "SNP", GenomeColors.SNP),
    (FeatureType.VARIANT, "del", GenomeColors.DELETION),
    (FeatureType.VARIANT, None, GenomeColors.DEFAULT),
    (FeatureType.GENE, None, GenomeColors.GENE),
    (FeatureType.EXON, None, GenomeColors.EXON),
    ("repeat", None, GenomeColors.DEFAULT),
])
def test_feature_colors(type_, sub_type, color) -> None:
    feature = Feature(id="f", ref_name="chr1", start=0, end=1, type=type_, sub_type=sub_type)
    assert GenomeColors.get_feature_color(feature) == color


def test_position_formats() -> None:
    assert format_position(1234567.6) == "1,234,568"
    assert format_position(0) == "0"
    assert format_position(999.4) == "999"
