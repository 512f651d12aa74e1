
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

DEFAULT_CONFIG_PATH = Path(__file__).parent / "default.yaml"
LOCAL_CONFIG_PATH = Path("./local.yaml")
CONFIG_ENV_VAR = "OVB_CONFIG"


def _load_yaml(path) -> Dict[str, Any]:
    with open(path) as f:
        cfg = yaml.safe_load(f)
    return cfg or {}


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(merged.get(k), dict):
            merged[k] = _merge(merged[k], v)
        else:
            merged[k] = v
    return merged


def get_config_path(default=False) -> Optional[Path]:
    """Path of the override file in effect, or None when only defaults apply."""
    if default:
        return None

    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)
    if LOCAL_CONFIG_PATH.exists():
        return LOCAL_CONFIG_PATH
    return None


def get_config(path=None, default=False) -> Dict[str, Any]:
    """
    Load the configuration.

    The packaged default.yaml is always read first; keys from the override
    file (explicit ``path``, then $OVB_CONFIG, then ./local.yaml) replace it.

    Args:
        path: Explicit override file
        default: Ignore every override and return the packaged defaults

    Returns:
        Merged configuration dict
    """
    cfg = _load_yaml(DEFAULT_CONFIG_PATH)

    if path is None:
        path = get_config_path(default=default)
    if path is not None and not default:
        cfg = _merge(cfg, _load_yaml(path))

    return cfg


@dataclass
class RenderSettings:
    width: int = 960
    height: int = 400
    device_pixel_ratio: float = 1.0
    axis_y: int = 30
    axis_tick_length: int = 5
    axis_label_gap: int = 10
    track_top: int = 50
    tick_count: int = 10
    frames_per_second: int = 60
    font: str = "10px sans-serif"
    axis_color: str = "#333333"

    @classmethod
    def from_config(cls, cfg: Optional[Dict[str, Any]] = None) -> "RenderSettings":
        if cfg is None:
            cfg = get_config()
        section = cfg.get("renderer", {}) or {}
        names = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in section.items() if k in names})


@dataclass
class TrackSettings:
    """Per-kind track geometry, keyed by track kind ("feature", "gene")."""
    geometry: Dict[str, Dict[str, Any]] = field(default_factory=dict)

    def for_kind(self, kind: str) -> Dict[str, Any]:
        return dict(self.geometry.get(kind, {}))

    @classmethod
    def from_config(cls, cfg: Optional[Dict[str, Any]] = None) -> "TrackSettings":
        if cfg is None:
            cfg = get_config()
        return cls(geometry=dict(cfg.get("tracks", {}) or {}))
