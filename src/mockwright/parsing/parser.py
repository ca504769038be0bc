"""Parser adapter: feeds files to tree-sitter and accumulates results.

One ``Parser`` lives for one scan. Every ``parse()`` call lowers a file,
appends its interfaces to the shared catalog and checks whether the file is
the registration provider. ``load()`` closes the scan and freezes the catalog.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

import structlog

from mockwright.catalog import InterfaceCatalog, InterfaceRecord
from mockwright.parsing.nodes import (
    Field,
    FieldList,
    InterfaceType,
    MethodSpec,
    SourceFile,
    TypeRef,
    TypeShape,
)
from mockwright.parsing.treesitter import TreeSitterParser
from mockwright.register import RegistrationEntry, is_registration_candidate

log = structlog.get_logger(__name__)

# The predeclared ``error`` interface, for interfaces that embed it.
_ERROR_METHODS = (
    MethodSpec(
        name="Error",
        params=FieldList(),
        results=FieldList(
            (Field(names=(), type=TypeRef(TypeShape.IDENT, "string", name="string")),)
        ),
    ),
)


def _expand_methods(
    name: str, interfaces: dict[str, InterfaceType], seen: frozenset[str] = frozenset()
) -> tuple[list[MethodSpec], list[str]]:
    """Own methods plus those of same-file embedded interfaces, in order."""
    node = interfaces[name]
    methods = list(node.methods)
    unresolved: list[str] = []
    for embed in node.embeds:
        if embed.shape is TypeShape.IDENT and embed.name == "error":
            methods.extend(_ERROR_METHODS)
        elif (
            embed.shape is TypeShape.IDENT
            and embed.name in interfaces
            and embed.name not in seen
        ):
            inner, missing = _expand_methods(embed.name, interfaces, seen | {name})
            methods.extend(inner)
            unresolved.extend(missing)
        else:
            unresolved.append(embed.text)

    # An embedded method set may repeat a method with an identical signature
    unique: dict[str, MethodSpec] = {}
    for method in methods:
        unique.setdefault(method.name, method)
    return list(unique.values()), unresolved


class Parser:
    """Accumulates interface declarations across ``parse()`` calls."""

    def __init__(self, build_tags: Sequence[str] = ()) -> None:
        # Carried for the record; constraints are not evaluated.
        self.build_tags = tuple(build_tags)
        self.register_entry: RegistrationEntry | None = None
        self._catalog = InterfaceCatalog()
        self._ts = TreeSitterParser()

    def parse(self, path: str) -> list[InterfaceRecord]:
        """Parse one file and return the interfaces it declared.

        Raises:
            ParseError: Unreadable file or syntax error. Nothing is recorded.
        """
        source = self._ts.parse(Path(path))
        records = self._records(path, source)
        for record in records:
            self._catalog.add(record)

        if is_registration_candidate(source):
            if self.register_entry is None:
                self.register_entry = RegistrationEntry(file_name=path, syntax=source)
                log.debug("register_entry_found", file=path)
            else:
                log.warning(
                    "register_entry_ignored",
                    file=path,
                    selected=self.register_entry.file_name,
                )

        log.debug("parsed", file=path, interfaces=[r.name for r in records])
        return records

    def _records(self, path: str, source: SourceFile) -> list[InterfaceRecord]:
        interfaces = {
            s.name: s.type for s in source.type_specs() if isinstance(s.type, InterfaceType)
        }
        records: list[InterfaceRecord] = []
        for spec in source.type_specs():
            if not isinstance(spec.type, InterfaceType):
                continue
            methods, unresolved = _expand_methods(spec.name, interfaces)
            records.append(
                InterfaceRecord(
                    name=spec.name,
                    file_name=path,
                    package=source.package,
                    node=spec.type,
                    methods=tuple(methods),
                    type_params=spec.type_params,
                    imports=source.imports,
                    unresolved=tuple(unresolved),
                )
            )
        return records

    def load(self) -> InterfaceCatalog:
        """Finish the scan. The catalog is read-only from here on."""
        self._catalog.freeze()
        log.debug(
            "catalog_loaded",
            interfaces=len(self._catalog),
            build_tags=list(self.build_tags),
            register_entry=self.register_entry.file_name if self.register_entry else None,
        )
        return self._catalog
