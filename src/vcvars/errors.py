from __future__ import annotations


class VcvarsError(RuntimeError):
    """Base class for everything that can go wrong while capturing vcvars."""


class MissingEnvVarDependencyError(VcvarsError):
    def __init__(self, name: str) -> None:
        super().__init__(f"env var `{name}` isn't set, which is a dependency to run vcvars")
        self.name = name


class VcvarsFileNotFoundError(VcvarsError, FileNotFoundError):
    def __init__(self, path: str) -> None:
        super().__init__(f"couldn't find file `{path}`")
        self.path = path


class VisualStudioNotFoundError(VcvarsError):
    """vswhere ran fine but reported no matching installation."""


class VswhereOutputError(VcvarsError):
    """vswhere printed something that isn't its JSON instance list."""


class UnsupportedArchError(VcvarsError):
    def __init__(self, host: str, target: str) -> None:
        super().__init__(f"unsupported host or target architecture (host `{host}`, target `{target}`)")
        self.host = host
        self.target = target


class CouldNotRunError(VcvarsError):
    def __init__(self, program: str, cause: BaseException) -> None:
        super().__init__(f"couldn't run `{program}`: {cause}")
        self.program = program
        self.cause = cause


class VcvarsFailedError(VcvarsError):
    def __init__(self, output: str) -> None:
        super().__init__(f"`vcvarsall.bat` failed: {output}")
        self.output = output


class CacheError(VcvarsError):
    def __init__(self, path: str, cause: BaseException | str) -> None:
        super().__init__(f"I/O operation regarding cache path `{path}` failed: {cause}")
        self.path = path
        self.cause = cause


class VarNotFoundError(VcvarsError):
    def __init__(self, name: str) -> None:
        super().__init__(f"variable `{name}` not found in vcvars environment")
        self.name = name


class ConfigError(VcvarsError, ValueError):
    """A VCVARS_* setting has a value that can't be used."""
