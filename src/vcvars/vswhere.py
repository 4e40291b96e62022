"""Locate a Visual Studio installation with Microsoft's ``vswhere.exe``."""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Sequence
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from .config import VcvarsConfig
from .errors import (
    CouldNotRunError,
    MissingEnvVarDependencyError,
    VcvarsFileNotFoundError,
    VisualStudioNotFoundError,
    VswhereOutputError,
)

LOGGER = logging.getLogger("vcvars.vswhere")

DEFAULT_SELECTION: tuple[str, ...] = ("-latest",)


class VisualStudioInstance(BaseModel):
    """One entry of ``vswhere -format json``."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    installation_path: Path = Field(alias="installationPath")
    installation_version: str = Field(default="", alias="installationVersion")
    display_name: str = Field(default="", alias="displayName")
    instance_id: str = Field(default="", alias="instanceId")
    is_prerelease: bool = Field(default=False, alias="isPrerelease")


_INSTANCES = TypeAdapter(list[VisualStudioInstance])


def vswhere_path(config: VcvarsConfig) -> Path:
    # Microsoft: "This is a fixed location that will be maintained."
    # https://github.com/Microsoft/vswhere/wiki/Installing
    program_files_x86 = config.getenv("PROGRAMFILES(X86)")
    if not program_files_x86:
        raise MissingEnvVarDependencyError("PROGRAMFILES(X86)")
    path = Path(program_files_x86) / "Microsoft Visual Studio" / "Installer" / "vswhere.exe"
    if not path.is_file():
        raise VcvarsFileNotFoundError(str(path))
    return path


def vswhere_command(vswhere: Path, selection: Sequence[str] | None = None) -> list[str]:
    cmd = [str(vswhere), "-prerelease"]
    cmd.extend(DEFAULT_SELECTION if selection is None else selection)
    cmd.extend(["-format", "json", "-utf8"])
    return cmd


def parse_instances(raw: bytes | str) -> list[VisualStudioInstance]:
    try:
        return _INSTANCES.validate_json(raw)
    except ValidationError as exc:
        raise VswhereOutputError(f"unexpected vswhere output: {exc}") from exc


def find_instance(config: VcvarsConfig) -> VisualStudioInstance:
    vswhere = vswhere_path(config)
    cmd = vswhere_command(vswhere, config.vswhere_args)
    LOGGER.debug("running %s", cmd)
    try:
        proc = subprocess.run(
            cmd,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            timeout=config.timeout_s,
            check=False,
        )
    except (OSError, subprocess.TimeoutExpired) as exc:
        raise CouldNotRunError(str(vswhere), exc) from exc

    if proc.returncode != 0:
        stderr = proc.stderr.decode("utf-8", errors="replace").strip()
        raise CouldNotRunError(str(vswhere), RuntimeError(f"exit code {proc.returncode}: {stderr}"))

    instances = parse_instances(proc.stdout)
    if not instances:
        raise VisualStudioNotFoundError(f"vswhere found no Visual Studio installation ({' '.join(cmd[1:])})")

    instance = instances[0]
    LOGGER.info(
        "using %s %s at %s",
        instance.display_name or "Visual Studio",
        instance.installation_version,
        instance.installation_path,
    )
    return instance


def vcvarsall_path(instance: VisualStudioInstance) -> Path:
    path = instance.installation_path / "VC" / "Auxiliary" / "Build" / "vcvarsall.bat"
    if not path.is_file():
        raise VcvarsFileNotFoundError(str(path))
    return path
