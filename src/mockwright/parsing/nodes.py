"""Language-neutral declaration tree.

The Parser Adapter lowers a tree-sitter parse into these nodes. Everything
downstream (interface catalog, registration matcher, mock generator) works on
this tree and never touches tree-sitter directly.

Node kinds:

- ``SourceFile``: package name, imports, top-level declarations
- ``FuncDecl``: function or method declaration (receiver is None for functions)
- ``TypeSpec``: a named type; ``type`` is an ``InterfaceType``, ``StructType``
  or ``TypeRef``
- ``InterfaceType`` / ``MethodSpec``: method sets
- ``StructType``: wraps one ``FieldList``
- ``FieldList`` / ``Field``: any field grouping (parameters, results, struct
  fields, type parameters)
- ``TypeRef``: a type expression, with a coarse ``TypeShape``

Traversal mirrors :mod:`ast`: :func:`walk` yields every node pre-order and
:class:`NodeVisitor` dispatches to ``visit_<kind>`` methods.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, ClassVar

_MAJOR_VERSION = re.compile(r"^v[0-9]+$")


class NodeKind(StrEnum):
    SOURCE_FILE = "source_file"
    IMPORT = "import"
    FUNC_DECL = "func_decl"
    TYPE_SPEC = "type_spec"
    INTERFACE = "interface"
    METHOD = "method"
    STRUCT = "struct"
    FIELD_LIST = "field_list"
    FIELD = "field"
    TYPE_REF = "type_ref"


class TypeShape(StrEnum):
    """Coarse classification of a type expression."""

    IDENT = "ident"  # Widget, error, T
    QUALIFIED = "qualified"  # dig.In, context.Context
    POINTER = "pointer"  # *Widget
    OTHER = "other"  # slices, maps, funcs, generics, ...


@dataclass(frozen=True, slots=True)
class Node:
    kind: ClassVar[NodeKind]

    def children(self) -> Iterator[Node]:
        return iter(())


@dataclass(frozen=True, slots=True)
class TypeRef(Node):
    """A type expression.

    ``text`` is the source spelling. ``qualified_text`` is the same type with
    every package-local named type prefixed by the declaring package name,
    for use outside that package.
    """

    kind: ClassVar[NodeKind] = NodeKind.TYPE_REF

    shape: TypeShape
    text: str
    name: str = ""  # IDENT / QUALIFIED: the type name
    package: str = ""  # QUALIFIED: the package qualifier
    elem: TypeRef | None = None  # POINTER: the pointee
    qualified_text: str = ""
    packages: frozenset[str] = frozenset()  # package qualifiers referenced
    local_names: frozenset[str] = frozenset()  # unqualified non-builtin names

    def children(self) -> Iterator[Node]:
        if self.elem is not None:
            yield self.elem

    def is_selector(self, name: str) -> bool:
        """True for a qualified reference ``pkg.<name>``."""
        return self.shape is TypeShape.QUALIFIED and self.name == name

    def render(self, *, qualified: bool) -> str:
        return self.qualified_text if qualified and self.qualified_text else self.text


@dataclass(frozen=True, slots=True)
class Field(Node):
    kind: ClassVar[NodeKind] = NodeKind.FIELD

    names: tuple[str, ...]
    type: TypeRef
    tag: str | None = None  # raw literal, quotes/backticks included
    variadic: bool = False

    def children(self) -> Iterator[Node]:
        yield self.type


@dataclass(frozen=True, slots=True)
class FieldList(Node):
    kind: ClassVar[NodeKind] = NodeKind.FIELD_LIST

    fields: tuple[Field, ...] = ()

    def __len__(self) -> int:
        return len(self.fields)

    def children(self) -> Iterator[Node]:
        yield from self.fields


@dataclass(frozen=True, slots=True)
class ImportSpec(Node):
    kind: ClassVar[NodeKind] = NodeKind.IMPORT

    path: str
    name: str | None = None  # explicit alias, "." or "_"

    @property
    def local_name(self) -> str:
        """Name the import is referenced by inside the file."""
        if self.name:
            return self.name
        segments = self.path.split("/")
        last = segments[-1]
        if _MAJOR_VERSION.match(last) and len(segments) > 1:
            last = segments[-2]
        return last.split(".")[0].removeprefix("go-")


@dataclass(frozen=True, slots=True)
class MethodSpec(Node):
    kind: ClassVar[NodeKind] = NodeKind.METHOD

    name: str
    params: FieldList
    results: FieldList

    def children(self) -> Iterator[Node]:
        yield self.params
        yield self.results


@dataclass(frozen=True, slots=True)
class InterfaceType(Node):
    kind: ClassVar[NodeKind] = NodeKind.INTERFACE

    methods: tuple[MethodSpec, ...] = ()
    embeds: tuple[TypeRef, ...] = ()

    def children(self) -> Iterator[Node]:
        yield from self.methods
        yield from self.embeds


@dataclass(frozen=True, slots=True)
class StructType(Node):
    kind: ClassVar[NodeKind] = NodeKind.STRUCT

    fields: FieldList

    def children(self) -> Iterator[Node]:
        yield self.fields


@dataclass(frozen=True, slots=True)
class TypeSpec(Node):
    kind: ClassVar[NodeKind] = NodeKind.TYPE_SPEC

    name: str
    type: InterfaceType | StructType | TypeRef
    type_params: FieldList | None = None

    def children(self) -> Iterator[Node]:
        if self.type_params is not None:
            yield self.type_params
        yield self.type


@dataclass(frozen=True, slots=True)
class FuncDecl(Node):
    kind: ClassVar[NodeKind] = NodeKind.FUNC_DECL

    name: str
    params: FieldList
    results: FieldList
    receiver: FieldList | None = None

    def children(self) -> Iterator[Node]:
        if self.receiver is not None:
            yield self.receiver
        yield self.params
        yield self.results


@dataclass(frozen=True, slots=True)
class SourceFile(Node):
    kind: ClassVar[NodeKind] = NodeKind.SOURCE_FILE

    path: str
    package: str
    imports: tuple[ImportSpec, ...] = ()
    decls: tuple[FuncDecl | TypeSpec, ...] = ()

    def children(self) -> Iterator[Node]:
        yield from self.imports
        yield from self.decls

    def type_specs(self) -> Iterator[TypeSpec]:
        return (d for d in self.decls if isinstance(d, TypeSpec))

    def functions(self) -> Iterator[FuncDecl]:
        return (d for d in self.decls if isinstance(d, FuncDecl) and d.receiver is None)


def walk(node: Node) -> Iterator[Node]:
    """Yield ``node`` and all its descendants, depth-first pre-order."""
    yield node
    for child in node.children():
        yield from walk(child)


class NodeVisitor:
    """Dispatches ``visit(node)`` to ``visit_<kind>``.

    Handlers that want to descend call :meth:`generic_visit` themselves.
    """

    def visit(self, node: Node) -> Any:
        method = getattr(self, f"visit_{node.kind.value}", self.generic_visit)
        return method(node)

    def generic_visit(self, node: Node) -> None:
        for child in node.children():
            self.visit(child)
