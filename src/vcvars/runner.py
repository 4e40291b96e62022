"""Run vcvarsall.bat inside cmd.exe and read back the environment it leaves."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from .config import VcvarsConfig
from .errors import CouldNotRunError, MissingEnvVarDependencyError, VcvarsFailedError

LOGGER = logging.getLogger("vcvars.runner")

SEPARATOR_LINE = "=" * 20 + "_unique_separator_by_vcvars_environment_capture"


def cmd_exe_path(config: VcvarsConfig) -> Path:
    win_dir = config.getenv("WINDIR")
    if not win_dir:
        raise MissingEnvVarDependencyError("WINDIR")
    return Path(win_dir) / "System32" / "cmd.exe"


def escape_for_cmd(text: str) -> str:
    """Escape the cmd.exe metacharacters that survive inside a script path.

    ``%`` cannot be escaped on a ``/C`` command line; a path with two ``%``
    around an existing variable name will still break.
    """
    return text.replace("^", "^^").replace("&", "^&")


def build_command(cmd_exe: Path, vcvarsall: Path, arch_arg: str) -> list[str]:
    return [
        str(cmd_exe),
        "/C",
        escape_for_cmd(str(vcvarsall)),
        arch_arg,
        "&&",
        f"echo.{SEPARATOR_LINE}",
        "&&",
        "set",
    ]


def output_lines(text: str) -> list[str]:
    """Split on ``\\n`` only, dropping a trailing ``\\r`` from each line.

    Values may contain form feeds and other characters that
    ``str.splitlines()`` treats as line ends.
    """
    lines = [line.removesuffix("\r") for line in text.split("\n")]
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def parse_set_output(text: str, separator: str = SEPARATOR_LINE) -> dict[str, str]:
    """Collect ``KEY=value`` lines printed by ``set`` after the separator line.

    Keys are upper-cased since Windows treats variable names case-insensitively.
    """
    env: dict[str, str] = {}
    collecting = False
    for line in output_lines(text):
        if not collecting:
            # cmd.exe may append a space to the echoed line.
            if line.startswith(separator):
                collecting = True
            continue
        key, sep, value = line.partition("=")
        if not sep or not key:
            continue
        env[key.upper()] = value
    return env


def check_vcvars_output(text: str) -> None:
    # vcvarsall exits with 0 even when it fails.
    if text.startswith("[ERROR:"):
        raise VcvarsFailedError(r"\n".join(output_lines(text)))


def run_vcvars(config: VcvarsConfig, vcvarsall: Path, arch_arg: str) -> dict[str, str]:
    cmd_exe = cmd_exe_path(config)
    cmd = build_command(cmd_exe, vcvarsall, arch_arg)
    LOGGER.debug("running %s", cmd)
    try:
        proc = subprocess.run(
            cmd,
            stdout=subprocess.PIPE,
            timeout=config.timeout_s,
            check=False,
        )
    except (OSError, subprocess.TimeoutExpired) as exc:
        raise CouldNotRunError(str(cmd_exe), exc) from exc

    stdout = proc.stdout.decode("utf-8", errors="replace")
    check_vcvars_output(stdout)
    env = parse_set_output(stdout)
    LOGGER.info("vcvars (%s) set %d environment variables", arch_arg, len(env))
    return env
