"""Host/target architecture handling for vcvarsall.bat.

vcvarsall takes a single positional argument naming the host toolset and the
target platform, e.g. ``x64`` or ``x64_arm64``. See
https://learn.microsoft.com/en-us/cpp/build/building-on-the-command-line#vcvarsall-syntax
"""

from __future__ import annotations

import platform

from .errors import UnsupportedArchError

_ALIASES: dict[str, str] = {
    "x86": "x86",
    "i386": "x86",
    "i486": "x86",
    "i586": "x86",
    "i686": "x86",
    "win32": "x86",
    "x86_64": "x86_64",
    "amd64": "x86_64",
    "x64": "x86_64",
    "arm": "arm",
    "armv7": "arm",
    "armv7l": "arm",
    "aarch64": "aarch64",
    "arm64": "aarch64",
}

_VCVARSALL_ARGS: dict[str, dict[str, str]] = {
    "x86": {
        "x86": "x86",
        "x86_64": "x86_x64",
        "arm": "x86_arm",
        "aarch64": "x86_arm64",
    },
    "x86_64": {
        "x86": "x64_x86",
        "x86_64": "x64",
        "arm": "x64_arm",
        "aarch64": "x64_arm64",
    },
    "aarch64": {
        "x86": "arm64_x86",
        "x86_64": "arm64_x64",
        "arm": "arm64_arm",
        "aarch64": "arm64",
    },
}


def normalize_arch(name: str) -> str:
    """Map the many spellings of an architecture onto one canonical name.

    Unknown names are returned lower-cased so they surface in the
    ``UnsupportedArchError`` message as given.
    """
    key = name.strip().lower()
    return _ALIASES.get(key, key)


def host_arch() -> str:
    return normalize_arch(platform.machine())


def vcvarsall_arg(host: str, target: str) -> str:
    host_key = normalize_arch(host)
    target_key = normalize_arch(target)
    try:
        return _VCVARSALL_ARGS[host_key][target_key]
    except KeyError:
        raise UnsupportedArchError(host, target) from None
