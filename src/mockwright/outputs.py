"""Output sinks for generated mocks.

A provider hands out one writer per interface as a context manager; the
writer is released when the block exits, whatever happened inside it. A file
whose block raised is removed.
Failing to acquire a writer raises ``OutputError``.
"""

from __future__ import annotations

import re
import sys
from collections.abc import Iterator
from contextlib import AbstractContextManager, contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Literal, Protocol, TextIO

from mockwright.catalog import InterfaceRecord
from mockwright.core.errors import OutputError
from mockwright.core.progress import status

_WORD_BOUNDARY = re.compile(r"(.)([A-Z][a-z]+)")
_LOWER_UPPER = re.compile(r"([a-z0-9])([A-Z])")


def underscore_case(name: str) -> str:
    """``HTTPClientPool`` -> ``http_client_pool``."""
    s1 = _WORD_BOUNDARY.sub(r"\1_\2", name)
    return _LOWER_UPPER.sub(r"\1_\2", s1).lower()


class OutputStreamProvider(Protocol):
    def get_writer(self, iface: InterfaceRecord) -> AbstractContextManager[TextIO]: ...


@dataclass
class FileOutputStreamProvider:
    """Writes ``<base_dir>/<Name>.go``, or ``mock_<Name>.go`` beside the source."""

    base_dir: str
    in_package: bool = False
    case: Literal["camel", "underscore"] = "camel"

    def filename(self, name: str) -> str:
        if self.case == "underscore":
            name = underscore_case(name)
        if self.in_package:
            return f"mock_{name}.go"
        return f"{name}.go"

    def path_for(self, iface: InterfaceRecord) -> Path:
        if self.in_package:
            return Path(iface.file_name).parent / self.filename(iface.name)
        return Path(self.base_dir) / self.filename(iface.name)

    @contextmanager
    def get_writer(self, iface: InterfaceRecord) -> Iterator[TextIO]:
        path = self.path_for(iface)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            f = path.open("w", encoding="utf-8")
        except OSError as e:
            raise OutputError.writer_unavailable(str(path), e.strerror or str(e)) from e

        status(f"Generating mock for: {iface.name} in file: {path}")
        completed = False
        try:
            yield f
            completed = True
        finally:
            f.close()
            # Never leave a half-written mock behind
            if not completed:
                path.unlink(missing_ok=True)


class StdoutStreamProvider:
    """Writes every mock to standard output; never closes it."""

    @contextmanager
    def get_writer(self, iface: InterfaceRecord) -> Iterator[TextIO]:  # noqa: ARG002
        yield sys.stdout
