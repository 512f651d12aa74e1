"""
Canonical data model shared by adapters and tracks.

Coordinates are 0-based and half-open: a Region or Feature covers
``[start, end)``.
"""

import asyncio
import re
from dataclasses import dataclass, field
from enum import IntEnum
from types import MappingProxyType
from typing import Any, Mapping, Optional

from ovb.errors import LocusError


class Strand(IntEnum):
    FORWARD = 1
    REVERSE = -1
    NONE = 0

    @classmethod
    def parse(cls, value) -> "Strand":
        """Accept 1/-1/0 as well as the GFF-style '+', '-', '.'."""
        if isinstance(value, Strand):
            return value
        if value in ("+", 1, "1"):
            return cls.FORWARD
        if value in ("-", -1, "-1"):
            return cls.REVERSE
        return cls.NONE


class FeatureType:
    """Well-known feature types. Any other string is allowed too."""
    VARIANT = "variant"
    GENE = "gene"
    EXON = "exon"
    COVERAGE = "coverage"
    SV = "sv"


@dataclass(frozen=True)
class Region:
    ref_name: str
    start: int
    end: int

    def __post_init__(self):
        if self.start < 0:
            raise ValueError(f"Region start must be >= 0, got {self.start}")
        if self.start > self.end:
            raise ValueError(f"Region start ({self.start}) is after end ({self.end})")

    @property
    def length(self) -> int:
        return self.end - self.start

    def overlaps(self, start: int, end: int) -> bool:
        """Half-open overlap test against ``[start, end)``."""
        return start < self.end and end > self.start

    def __str__(self):
        return f"{self.ref_name}:{self.start}-{self.end}"


@dataclass(frozen=True)
class Feature:
    """
    One genomic annotation in a format-agnostic shape.

    ``data`` carries the raw format attributes (INFO fields, GFF attributes)
    and is wrapped read-only, so a feature cannot change after an adapter has
    produced it.
    """
    id: str
    ref_name: str
    start: int
    end: int
    type: str
    sub_type: Optional[str] = None
    score: Optional[float] = None
    strand: Strand = Strand.NONE
    data: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def __post_init__(self):
        if self.start > self.end:
            raise ValueError(f"Feature {self.id!r} start ({self.start}) is after end ({self.end})")
        object.__setattr__(self, "strand", Strand.parse(self.strand))
        object.__setattr__(self, "data", MappingProxyType(dict(self.data)))

    @property
    def length(self) -> int:
        return self.end - self.start

    @property
    def name(self) -> str:
        return str(self.data.get("Name") or self.id)

    def overlaps(self, region: Region) -> bool:
        return self.ref_name == region.ref_name and region.overlaps(self.start, self.end)


class CancellationToken:
    """Cooperative cancel signal, checked by adapters between yields."""

    def __init__(self):
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self):
        self._cancelled = True

    def raise_if_cancelled(self):
        if self._cancelled:
            raise asyncio.CancelledError()

    def __repr__(self):
        return f"CancellationToken(cancelled={self._cancelled})"


@dataclass(frozen=True)
class FetchOptions:
    token: Optional[CancellationToken] = None
    # downsampling hint, advisory only
    resolution: Optional[float] = None

    @property
    def cancelled(self) -> bool:
        return self.token is not None and self.token.cancelled


_LOCUS_RE = re.compile(r"^(?P<ref>[^:\s]+):(?P<start>[\d,]+)-(?P<end>[\d,]+)$")


def _parse_bound(text: str, locus: str) -> int:
    digits = text.replace(",", "")
    if not digits.isdigit():
        raise LocusError(locus, f"non-numeric bound {text!r}")
    return int(digits)


def parse_locus(locus: str) -> Region:
    """
    Parse ``"<ref>:<start>-<end>"`` into a Region.

    Bounds are decimal integers; thousands separators are accepted
    ("chr1:1,000-5,000"). The range must be non-empty.
    """
    if not isinstance(locus, str):
        raise LocusError(repr(locus), "expected a string")

    text = locus.strip()
    ref, sep, rng = text.partition(":")
    if not sep or not ref or not rng:
        raise LocusError(locus, "expected <ref>:<start>-<end>")

    m = _LOCUS_RE.match(text)
    if m is None:
        raise LocusError(locus, "malformed range")

    start = _parse_bound(m.group("start"), locus)
    end = _parse_bound(m.group("end"), locus)
    if end <= start:
        raise LocusError(locus, "end must be greater than start")

    return Region(m.group("ref"), start, end)
