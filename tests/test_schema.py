from __future__ import annotations

import dataclasses

import pytest

from ovb.core.schema import CancellationToken, Feature, FetchOptions, Region, Strand, parse_locus
from ovb.errors import LocusError


def test_parse_locus_basic() -> None:
    region = parse_locus("chr1:1000-5000")
    assert region == Region("chr1", 1000, 5000)
    assert region.length == 4000
    assert str(region) == "chr1:1000-5000"


def test_parse_locus_accepts_separators_and_whitespace() -> None:
    assert parse_locus("  chrX:1,000-2,500 ") == Region("chrX", 1000, 2500)


@pytest.mark.parametrize("locus", [
    "chr1",
    "chr1:",
    "chr1:1000",
    "chr1:1000-",
    "chr1:abc-5000",
    "chr1:1000-5k",
    ":1000-5000",
    "chr1:1000:5000",
    "chr1:-5-10",
    "chr1:5000-1000",
    "chr1:10-10",
])
def test_parse_locus_rejects_malformed(locus: str) -> None:
    with pytest.raises(LocusError):
        parse_locus(locus)


def test_locus_error_is_value_error() -> None:
    with pytest.raises(ValueError, match="Invalid locus string"):
        parse_locus(42)


def test_region_invariants() -> None:
    with pytest.raises(ValueError):
        Region("chr1", 10, 5)
    with pytest.raises(ValueError):
        Region("chr1", -1, 5)
    assert Region("chr1", 7, 7).length == 0


def test_region_overlap_is_half_open() -> None:
    region = Region("chr1", 1000, 5000)
    assert region.overlaps(4999, 5000)
    assert region.overlaps(0, 1001)
    assert not region.overlaps(5000, 5001)
    assert not region.overlaps(999, 1000)


def test_feature_is_immutable() -> None:
    attrs = {"Name": "BRCA2"}
    feature = Feature(id="g1", ref_name="chr13", start=10, end=20, type="gene", data=attrs)

    with pytest.raises(dataclasses.FrozenInstanceError):
        feature.start = 11
    with pytest.raises(TypeError):
        feature.data["Name"] = "other"

    attrs["Name"] = "changed"
    assert feature.name == "BRCA2"
    assert hash(feature) == hash(Feature(id="g1", ref_name="chr13", start=10, end=20, type="gene"))


def test_feature_name_falls_back_to_id() -> None:
    assert Feature(id="chr1:100:A:T", ref_name="chr1", start=100, end=101, type="variant").name == "chr1:100:A:T"


def test_feature_overlap_checks_reference() -> None:
    feature = Feature(id="f", ref_name="chr2", start=1500, end=1600, type="gene")
    assert not feature.overlaps(Region("chr1", 1000, 5000))
    assert feature.overlaps(Region("chr2", 1000, 5000))


@pytest.mark.parametrize("value, expected", [
    ("+", Strand.FORWARD),
    (1, Strand.FORWARD),
    ("-", Strand.REVERSE),
    (-1, Strand.REVERSE),
    (".", Strand.NONE),
    (None, Strand.NONE),
])
def test_strand_parse(value, expected) -> None:
    assert Feature(id="f", ref_name="c", start=0, end=1, type="exon", strand=value).strand is expected


def test_cancellation_token() -> None:
    token = CancellationToken()
    options = FetchOptions(token=token, resolution=10.0)
    assert not options.cancelled
    token.raise_if_cancelled()

    token.cancel()
    assert token.cancelled and options.cancelled
    with pytest.raises(BaseException):
        token.raise_if_cancelled()
    assert not FetchOptions().cancelled
