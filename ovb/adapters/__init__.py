
from typing import Any, Dict

from .memory import MemoryAdapter
from .mock import MockGff3Adapter, MockVcfAdapter

ADAPTER_TYPES = {
    "memory": MemoryAdapter,
    "mock_gff3": MockGff3Adapter,
    "mock_vcf": MockVcfAdapter,
}


def create_adapter(adapter_type: str, **options: Any):
    """Build an adapter from its registered type name."""
    cls = ADAPTER_TYPES.get(adapter_type)
    if cls is None:
        raise ValueError(f"Unknown adapter type: {adapter_type!r} (known: {', '.join(sorted(ADAPTER_TYPES))})")
    return cls(**options)


def adapter_from_config(spec: Dict[str, Any]):
    options = dict(spec)
    adapter_type = options.pop("type", None)
    if not adapter_type:
        raise ValueError(f"Adapter config is missing 'type': {spec!r}")
    return create_adapter(adapter_type, **options)


__all__ = [
    'MemoryAdapter', 'MockGff3Adapter', 'MockVcfAdapter',
    'ADAPTER_TYPES', 'create_adapter', 'adapter_from_config',
]
