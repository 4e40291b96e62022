from __future__ import annotations

import logging
import os
from collections.abc import MutableMapping
from dataclasses import replace
from pathlib import Path

from . import arch, runner, vswhere
from .cache import VarCache
from .config import VcvarsConfig
from .errors import MissingEnvVarDependencyError, VarNotFoundError, VcvarsError
from .vswhere import VisualStudioInstance

LOGGER = logging.getLogger("vcvars.environment")


class Vcvars:
    """Runs vcvars in a ``cmd.exe`` child process (at most once) and exposes
    the environment that process ended up with.

    Example::

        vcvars = Vcvars()
        include_dirs = vcvars.get_paths("INCLUDE")
        lib_dirs = vcvars.get_paths("LIB")

    Variable names are matched case-insensitively, as on Windows.
    """

    def __init__(self, config: VcvarsConfig | None = None) -> None:
        self.config = config or VcvarsConfig.from_env()
        self._env: dict[str, str] | None = None
        self._instance: VisualStudioInstance | None = None

    def not_vswhere_latest_but(self, *args: str) -> "Vcvars":
        """Call vswhere with ``args`` instead of its usual ``-latest``.

        Run ``vswhere -help`` for what is accepted, e.g.
        ``Vcvars().not_vswhere_latest_but("-version", "[15.0,16.0)")``.
        """
        if self._env is not None:
            raise VcvarsError("vcvars already ran; vswhere arguments must be set before the first lookup")
        self.config = replace(self.config, vswhere_args=tuple(args))
        return self

    @property
    def instance(self) -> VisualStudioInstance | None:
        return self._instance

    def get(self, var_name: str) -> str:
        """Return ``var_name`` from vcvars, running it on first use.

        Prefer ``get_cached()`` in build scripts that run repeatedly.
        """
        env = self._ensure_env()
        try:
            return env[var_name.upper()]
        except KeyError:
            raise VarNotFoundError(var_name) from None

    def get_cached(self, var_name: str) -> str:
        """Return ``var_name`` from the on-disk cache, filling it on a miss.

        The cache lives in ``<cache_dir>/vcvars-cache`` where ``cache_dir``
        comes from the config, ``VCVARS_CACHE_DIR`` or ``OUT_DIR``.
        """
        cache = self.cache()
        cache.ensure_directory()
        value = cache.read(var_name)
        if value is not None:
            return value
        value = self.get(var_name)
        path = cache.write(var_name, value)
        LOGGER.debug("cached %s at %s", var_name, path)
        return value

    def get_paths(self, var_name: str, *, cached: bool = False) -> list[Path]:
        """Split a list variable like ``INCLUDE`` or ``LIB`` into paths."""
        value = self.get_cached(var_name) if cached else self.get(var_name)
        return [Path(entry) for entry in value.split(";") if entry.strip()]

    def environment(self) -> dict[str, str]:
        return dict(self._ensure_env())

    def apply(self, environ: MutableMapping[str, str] | None = None) -> None:
        """Copy the captured variables into ``environ`` (default ``os.environ``)."""
        if environ is None:
            environ = os.environ
        environ.update(self._ensure_env())

    def cache(self) -> VarCache:
        if self.config.cache_dir is None:
            raise MissingEnvVarDependencyError("OUT_DIR")
        return VarCache(self.config.cache_dir)

    def _ensure_env(self) -> dict[str, str]:
        if self._env is None:
            self._env = self._capture()
        return self._env

    def _capture(self) -> dict[str, str]:
        # Check the cheap prerequisites before spawning anything.
        runner.cmd_exe_path(self.config)
        host = self.config.host_arch or arch.host_arch()
        target = self.config.target_arch or host
        arch_arg = arch.vcvarsall_arg(host, target)

        instance = vswhere.find_instance(self.config)
        vcvarsall = vswhere.vcvarsall_path(instance)
        self._instance = instance
        return runner.run_vcvars(self.config, vcvarsall, arch_arg)
