from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from .errors import ConfigError


def _env_float(name: str, default: float | None) -> float | None:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number of seconds, got {raw!r}") from None


@dataclass(slots=True)
class VcvarsConfig:
    """How to find Visual Studio and which toolset vcvars should set up."""

    target_arch: str | None = None
    host_arch: str | None = None
    cache_dir: Path | None = None
    # Replaces vswhere's `-latest`, e.g. ("-version", "[15.0,16.0)").
    vswhere_args: tuple[str, ...] | None = None
    timeout_s: float | None = None
    environ: dict[str, str] | None = field(default=None, repr=False)

    @classmethod
    def from_env(cls, **overrides) -> "VcvarsConfig":
        target = os.getenv("VCVARS_TARGET_ARCH") or os.getenv("CARGO_CFG_TARGET_ARCH")
        cache_root = os.getenv("VCVARS_CACHE_DIR") or os.getenv("OUT_DIR")
        config = cls(
            target_arch=target or None,
            cache_dir=Path(cache_root) if cache_root else None,
            timeout_s=_env_float("VCVARS_TIMEOUT_S", None),
        )
        for key, value in overrides.items():
            if value is not None:
                setattr(config, key, value)
        return config

    def getenv(self, name: str) -> str | None:
        source = self.environ if self.environ is not None else os.environ
        return source.get(name)
