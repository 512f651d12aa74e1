"""
Stand-in adapters for the GFF3 and tabix-indexed VCF sources.

Neither reads a file: they fabricate a fixed set of records placed relative to
the requested region's start, which is enough to drive the browser end to end.
A real implementation would resolve chunks through the tabix index, fetch
them with range requests, inflate the BGZF blocks and parse the lines.
"""

import asyncio
import logging
from typing import AsyncIterator, Dict, List, Optional

from ovb.core.adapter import iter_overlapping
from ovb.core.schema import Feature, FeatureType, FetchOptions, Region, Strand

logger = logging.getLogger(__name__)


class MockGff3Adapter:
    """Genes and exons, two genes on opposite strands."""

    def __init__(self, url: str = "", index_url: str = ""):
        self.url = url
        self.index_url = index_url
        self.initialized = False

    async def init(self):
        if not self.initialized:
            logger.info(f"Initializing GFF3 adapter for: {self.url}")
        self.initialized = True

    def make_features(self, region: Region) -> List[Feature]:
        base = region.start
        ref = region.ref_name

        def gene(gid, name, start, end, strand):
            return Feature(id=gid, ref_name=ref, start=base + start, end=base + end,
                           type=FeatureType.GENE, strand=strand, data={"Name": name, "ID": gid})

        def exon(eid, parent, start, end, strand):
            return Feature(id=eid, ref_name=ref, start=base + start, end=base + end,
                           type=FeatureType.EXON, strand=strand, data={"Parent": parent})

        return [
            gene("gene-A", "GENE_A", 200, 900, Strand.FORWARD),
            exon("gene-A-exon-1", "gene-A", 200, 350, Strand.FORWARD),
            exon("gene-A-exon-2", "gene-A", 500, 600, Strand.FORWARD),
            exon("gene-A-exon-3", "gene-A", 800, 900, Strand.FORWARD),
            gene("gene-B", "GENE_B", 1200, 1800, Strand.REVERSE),
            exon("gene-B-exon-1", "gene-B", 1600, 1800, Strand.REVERSE),
        ]

    async def get_features(self, region: Region, options: Optional[FetchOptions] = None) -> AsyncIterator[Feature]:
        logger.debug(f"Fetching GFF3 features for region: {region}")
        async for feature in iter_overlapping(self.make_features(region), region, options):
            yield feature

    async def close(self):
        self.initialized = False


class MockVcfAdapter:
    """A few SNPs and one insertion, with a per-record delay to mimic network latency."""

    samples = ["SAMPLE1", "SAMPLE2", "SAMPLE3"]
    contigs = ["chr1", "chr2", "chrX"]

    def __init__(self, url: str = "", index_url: str = "", delay: float = 0.05):
        self.url = url
        self.index_url = index_url
        self.delay = delay
        self.initialized = False

    async def init(self):
        if not self.initialized:
            logger.info(f"Initializing VCF adapter for: {self.url}")
        self.initialized = True

    async def get_header(self) -> Dict[str, List[str]]:
        return {"samples": list(self.samples), "contigs": list(self.contigs)}

    def make_features(self, region: Region) -> List[Feature]:
        records = [
            (100, "A", "T", 80, "SNP"),
            (250, "G", "C", 99, "SNP"),
            (500, "C", "GATTACA", 50, "INS"),
        ]
        features = []
        for offset, ref, alt, qual, kind in records:
            pos = region.start + offset
            features.append(Feature(
                id=f"{region.ref_name}:{pos}:{ref}:{alt}",
                ref_name=region.ref_name,
                start=pos,
                end=pos + 1,
                type=FeatureType.VARIANT,
                sub_type=kind,
                score=float(qual),
                data={"REF": ref, "ALT": alt, "QUAL": qual, "INFO": "."},
            ))
        return features

    async def get_features(self, region: Region, options: Optional[FetchOptions] = None) -> AsyncIterator[Feature]:
        logger.debug(f"Fetching VCF features for region: {region}")
        async for feature in iter_overlapping(self.make_features(region), region, options):
            if self.delay:
                await asyncio.sleep(self.delay)
                if options is not None and options.cancelled:
                    return
            yield feature

    async def close(self):
        logger.info("Closing VCF adapter.")
        self.initialized = False
