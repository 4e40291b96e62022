from __future__ import annotations

import json
import subprocess
from dataclasses import dataclass, field
from pathlib import Path

import pytest

from vcvars import VcvarsConfig
from vcvars.runner import SEPARATOR_LINE

VCVARS_BANNER = """**********************************************************************
** Visual Studio 2022 Developer Command Prompt v17.9.2
** Copyright (c) 2022 Microsoft Corporation
**********************************************************************
[vcvarsall.bat] Environment initialized for: 'x64'
"""


def set_output(env: dict[str, str], *, banner: str = VCVARS_BANNER) -> bytes:
    lines = [banner.rstrip("\n"), SEPARATOR_LINE + " "]
    lines.extend(f"{key}={value}" for key, value in env.items())
    return ("\r\n".join(lines) + "\r\n").encode("utf-8")


@dataclass
class FakeWindows:
    """A directory tree shaped like the bits of Windows vcvars needs."""

    root: Path
    vs_dir: Path
    vswhere: Path
    vcvarsall: Path
    cmd_exe: Path
    vcvars_env: dict[str, str]
    vswhere_payload: list[dict] = field(default_factory=list)
    vcvars_stdout: bytes | None = None
    vswhere_returncode: int = 0
    calls: list[list[str]] = field(default_factory=list)

    @property
    def environ(self) -> dict[str, str]:
        return {
            "PROGRAMFILES(X86)": str(self.root / "Program Files (x86)"),
            "WINDIR": str(self.root / "Windows"),
        }

    def config(self, **kwargs) -> VcvarsConfig:
        kwargs.setdefault("host_arch", "x86_64")
        kwargs.setdefault("target_arch", "x86_64")
        kwargs.setdefault("environ", self.environ)
        return VcvarsConfig(**kwargs)

    def run(self, cmd, **kwargs):
        self.calls.append(list(cmd))
        if cmd[0] == str(self.vswhere):
            if self.vswhere_returncode:
                return subprocess.CompletedProcess(cmd, self.vswhere_returncode, stdout=b"", stderr=b"Error 0x57: invalid argument")
            return subprocess.CompletedProcess(cmd, 0, stdout=json.dumps(self.vswhere_payload).encode(), stderr=b"")
        if cmd[0] == str(self.cmd_exe):
            stdout = self.vcvars_stdout if self.vcvars_stdout is not None else set_output(self.vcvars_env)
            return subprocess.CompletedProcess(cmd, 0, stdout=stdout, stderr=None)
        raise FileNotFoundError(cmd[0])

    def runs_of(self, program: Path) -> int:
        return sum(1 for cmd in self.calls if cmd[0] == str(program))


@pytest.fixture
def fake_windows(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> FakeWindows:
    vs_dir = tmp_path / "Program Files" / "Microsoft Visual Studio" / "2022" / "Community"
    vswhere = tmp_path / "Program Files (x86)" / "Microsoft Visual Studio" / "Installer" / "vswhere.exe"
    vcvarsall = vs_dir / "VC" / "Auxiliary" / "Build" / "vcvarsall.bat"
    cmd_exe = tmp_path / "Windows" / "System32" / "cmd.exe"
    for path in (vswhere, vcvarsall, cmd_exe):
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(b"")

    fake = FakeWindows(
        root=tmp_path,
        vs_dir=vs_dir,
        vswhere=vswhere,
        vcvarsall=vcvarsall,
        cmd_exe=cmd_exe,
        vcvars_env={
            "VisualStudioVersion": "17.0",
            "INCLUDE": r"C:\VS\VC\Tools\MSVC\14.39.33519\include;C:\Program Files (x86)\Windows Kits\10\include\10.0.22621.0\ucrt;",
            "LIB": r"C:\VS\VC\Tools\MSVC\14.39.33519\lib\x64;C:\Program Files (x86)\Windows Kits\10\lib\10.0.22621.0\um\x64",
            "Path": r"C:\VS\VC\Tools\MSVC\14.39.33519\bin\HostX64\x64;C:\Windows\system32",
            "VSCMD_ARG_TGT_ARCH": "x64",
        },
        vswhere_payload=[
            {
                "instanceId": "2f8a1b3c",
                "installationPath": str(vs_dir),
                "installationVersion": "17.9.34616.47",
                "displayName": "Visual Studio Community 2022",
                "isPrerelease": False,
                "catalog": {"productLineVersion": "2022"},
            }
        ],
    )
    monkeypatch.setattr(subprocess, "run", fake.run)
    return fake
