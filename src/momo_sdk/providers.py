"""Environment, filesystem and host lookups used by the plugin config loader.

The loader never touches ``os.environ``, the disk or the host name directly;
it goes through these providers so tests can substitute in-memory ones.
"""

from __future__ import annotations

import os
import socket
from dataclasses import dataclass, field
from pathlib import Path
from collections.abc import Mapping
from typing import Callable, Protocol

EnvProvider = Mapping[str, str]


class FileProvider(Protocol):
    def exists(self, path: Path) -> bool: ...

    def read_text(self, path: Path) -> str: ...


class LocalFileProvider:
    """Reads from the local filesystem."""

    def exists(self, path: Path) -> bool:
        return path.is_file()

    def read_text(self, path: Path) -> str:
        return path.read_text(encoding="utf-8")


@dataclass(slots=True)
class MemoryFileProvider:
    """In-memory files keyed by path, for tests and embedding hosts."""

    files: dict[Path, str] = field(default_factory=dict)

    def exists(self, path: Path) -> bool:
        return Path(path) in self.files

    def read_text(self, path: Path) -> str:
        try:
            return self.files[Path(path)]
        except KeyError:
            raise FileNotFoundError(str(path)) from None


@dataclass(slots=True)
class HostInfo:
    """Home directory and host name, resolved lazily."""

    home: Callable[[], Path] = Path.home
    hostname: Callable[[], str] = socket.gethostname
    cwd: Callable[[], Path] = Path.cwd


def process_env() -> Mapping[str, str]:
    return os.environ
