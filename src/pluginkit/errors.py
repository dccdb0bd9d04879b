from __future__ import annotations


class PluginkitError(Exception):
    """Base class for every operator-facing failure."""


class ValidationError(PluginkitError):
    pass


class PreconditionError(PluginkitError):
    pass


class DuplicateNameError(PluginkitError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Plugin already exists in marketplace.json: {name}")
        self.name = name


class RenderError(PluginkitError):
    pass


class WriteError(PluginkitError):
    pass


class RegistryCorruptError(PreconditionError):
    pass


class RegistryWriteError(PluginkitError):
    pass


class CommandError(PluginkitError):
    def __init__(self, cmd: list[str], returncode: int) -> None:
        super().__init__(f"Command failed with exit code {returncode}: {' '.join(cmd)}")
        self.cmd = cmd
        self.returncode = returncode
