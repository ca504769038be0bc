"""Interface catalog: the ordered record of every interface seen by a scan.

Records are appended by the parser while the tree is walked and the catalog
is frozen by ``Parser.load()``. After that it only supports iteration.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass

from mockwright.core.errors import InternalError
from mockwright.parsing.nodes import FieldList, ImportSpec, InterfaceType, MethodSpec


@dataclass(frozen=True, slots=True)
class InterfaceRecord:
    """One interface declaration.

    ``methods`` is the full method set: the interface's own methods followed
    by those of interfaces embedded from the same file. ``unresolved`` lists
    embedded names that could not be expanded without type information.
    """

    name: str
    file_name: str
    package: str
    node: InterfaceType
    methods: tuple[MethodSpec, ...] = ()
    type_params: FieldList | None = None
    imports: tuple[ImportSpec, ...] = ()
    unresolved: tuple[str, ...] = ()


class InterfaceCatalog:
    """Append-only, discovery-ordered collection of :class:`InterfaceRecord`."""

    def __init__(self) -> None:
        self._records: list[InterfaceRecord] = []
        self._frozen = False

    def add(self, record: InterfaceRecord) -> None:
        if self._frozen:
            raise InternalError.catalog_frozen(record.file_name)
        self._records.append(record)

    def freeze(self) -> None:
        self._frozen = True

    def __iter__(self) -> Iterator[InterfaceRecord]:
        return iter(tuple(self._records))

    def __len__(self) -> int:
        return len(self._records)

    def matching(self, pattern: re.Pattern[str]) -> Iterator[InterfaceRecord]:
        """Records whose bare name matches ``pattern`` (unanchored search)."""
        return (r for r in self if pattern.search(r.name))
