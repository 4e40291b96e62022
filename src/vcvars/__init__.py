from .arch import host_arch, normalize_arch, vcvarsall_arg
from .cache import VarCache, sanitize_filename
from .config import VcvarsConfig
from .environment import Vcvars
from .errors import (
    CacheError,
    ConfigError,
    CouldNotRunError,
    MissingEnvVarDependencyError,
    UnsupportedArchError,
    VarNotFoundError,
    VcvarsError,
    VcvarsFailedError,
    VcvarsFileNotFoundError,
    VisualStudioNotFoundError,
    VswhereOutputError,
)
from .vswhere import VisualStudioInstance

__version__ = "0.1.0"

__all__ = [
    "CacheError",
    "ConfigError",
    "CouldNotRunError",
    "MissingEnvVarDependencyError",
    "UnsupportedArchError",
    "VarCache",
    "VarNotFoundError",
    "Vcvars",
    "VcvarsConfig",
    "VcvarsError",
    "VcvarsFailedError",
    "VcvarsFileNotFoundError",
    "VisualStudioInstance",
    "VisualStudioNotFoundError",
    "VswhereOutputError",
    "host_arch",
    "normalize_arch",
    "sanitize_filename",
    "vcvarsall_arg",
]
