"""Source tree scanner and walk orchestrator.

The scan is depth-first over a sorted directory listing. Every eligible Go
file is handed to the parser, which accumulates interfaces into the catalog.
Once the scan is done the catalog is frozen, the registration file is
synthesized (when a provider was found), and each interface whose name
matches the filter is dispatched to the visitor.
"""

from __future__ import annotations

import os
import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Protocol

import structlog

from mockwright.catalog import InterfaceRecord
from mockwright.config.constants import SKIPPED_PREFIXES, SOURCE_SUFFIX, TEST_SUFFIX
from mockwright.core.errors import ParseError
from mockwright.core.progress import status
from mockwright.parsing.parser import Parser
from mockwright.register import RegistrationEntry

log = structlog.get_logger(__name__)

MATCH_ALL = re.compile(".*")


@dataclass(frozen=True, slots=True)
class WalkConfig:
    """Parameters for one run.

    Attributes:
        base_dir: Root of the scan.
        recursive: Descend into subdirectories.
        filter: Tested with ``search`` against bare interface names.
        limit_one: Stop after the first match (scan) and first success (dispatch).
        build_tags: Opaque; carried to the parser, never evaluated.
    """

    base_dir: str
    recursive: bool = False
    filter: re.Pattern[str] = MATCH_ALL
    limit_one: bool = False
    build_tags: tuple[str, ...] = field(default_factory=tuple)


class WalkerVisitor(Protocol):
    def visit_walk(self, iface: InterfaceRecord) -> bool: ...

    def generate_mock_register(self, entry: RegistrationEntry) -> None: ...


def is_source_file(name: str) -> bool:
    """Go source that is not a test file."""
    return name.endswith(SOURCE_SUFFIX) and not name.endswith(TEST_SUFFIX)


class Walker:
    """Scans ``config.base_dir`` and drives a :class:`WalkerVisitor`."""

    def __init__(
        self,
        config: WalkConfig,
        parser_factory: Callable[[Sequence[str]], Parser] = Parser,
    ) -> None:
        self.config = config
        self.parser_factory = parser_factory

    def walk(self, visitor: WalkerVisitor) -> bool:
        """Run scan, registration and dispatch. Returns whether any mock was generated.

        Raises:
            MockwrightError: Fatal output or generation failures from the visitor.
        """
        parser = self.parser_factory(self.config.build_tags)
        self._do_walk(parser, self.config.base_dir)
        catalog = parser.load()

        if parser.register_entry is not None:
            visitor.generate_mock_register(parser.register_entry)
        else:
            log.debug("register_entry_absent", base_dir=self.config.base_dir)

        generated = False
        for iface in catalog.matching(self.config.filter):
            if visitor.visit_walk(iface):
                generated = True
                if self.config.limit_one:
                    break

        log.info(
            "walk_complete",
            base_dir=self.config.base_dir,
            interfaces=len(catalog),
            generated=generated,
        )
        return generated

    def _do_walk(self, parser: Parser, directory: str) -> bool:
        """Scan one directory. Returns whether a matching file was seen below it."""
        try:
            with os.scandir(directory) as it:
                entries = sorted(it, key=lambda e: e.name)
        except OSError as e:
            log.debug("directory_unreadable", directory=directory, error=str(e))
            return False

        generated = False
        for entry in entries:
            if entry.name.startswith(SKIPPED_PREFIXES):
                continue

            path = os.path.join(directory, entry.name)

            if entry.is_dir(follow_symlinks=False):
                if self.config.recursive:
                    generated = self._do_walk(parser, path) or generated
                    if generated and self.config.limit_one:
                        return True
                continue

            if not entry.is_file() or not is_source_file(entry.name):
                continue

            try:
                records = parser.parse(path)
            except ParseError as e:
                log.warning("parse_failed", file=path, code=int(e.code), error=e.message)
                status(f"Error parsing file: {e.message}", style="error")
                continue

            if any(self.config.filter.search(r.name) for r in records):
                generated = True
                if self.config.limit_one:
                    return True

        return generated
