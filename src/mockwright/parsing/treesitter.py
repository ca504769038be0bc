"""Tree-sitter lowering for Go source files.

Parses one file with the ``tree-sitter-go`` grammar and converts the concrete
syntax tree into the language-neutral nodes of :mod:`mockwright.parsing.nodes`.
Only declaration structure is kept: package clause, imports, functions and
methods (signatures only), and type specs. Bodies are never lowered.

Usage::

    parser = TreeSitterParser()
    source = parser.parse(Path("pkg/types.go"))  # SourceFile
"""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any

import tree_sitter
import tree_sitter_go

from mockwright.core.errors import ParseError
from mockwright.parsing.nodes import (
    Field,
    FieldList,
    FuncDecl,
    ImportSpec,
    InterfaceType,
    MethodSpec,
    SourceFile,
    StructType,
    TypeRef,
    TypeShape,
    TypeSpec,
)

BUILTIN_TYPES = frozenset(
    {
        "any",
        "bool",
        "byte",
        "comparable",
        "complex64",
        "complex128",
        "error",
        "float32",
        "float64",
        "int",
        "int8",
        "int16",
        "int32",
        "int64",
        "rune",
        "string",
        "uint",
        "uint8",
        "uint16",
        "uint32",
        "uint64",
        "uintptr",
    }
)

# Grammar versions differ in how interface members are named.
_METHOD_ELEMS = frozenset({"method_elem", "method_spec"})
_EMBED_ELEMS = frozenset({"type_elem", "interface_type_name", "constraint_elem"})
_PARAM_DECLS = frozenset({"parameter_declaration", "variadic_parameter_declaration"})


@lru_cache(maxsize=1)
def go_language() -> tree_sitter.Language:
    """Load the Go grammar once per process."""
    return tree_sitter.Language(tree_sitter_go.language())


def _text(node: Any) -> str:
    return node.text.decode("utf-8") if node is not None and node.text else ""


def _unquote(literal: str) -> str:
    if len(literal) >= 2 and literal[0] in "\"`" and literal[-1] == literal[0]:
        return literal[1:-1]
    return literal


def _first_error(node: Any) -> Any | None:
    """Locate the first ERROR or missing node, pre-order."""
    if node.type == "ERROR" or node.is_missing:
        return node
    for child in node.children:
        if child.has_error or child.is_missing:
            found = _first_error(child)
            if found is not None:
                return found
    return None


@dataclass
class _Lowering:
    """Per-file conversion state."""

    source: bytes
    package: str = ""
    # Names that must never be package-qualified (type parameters in scope)
    type_params: frozenset[str] = field(default_factory=frozenset)

    # ------------------------------------------------------------------
    # Types
    # ------------------------------------------------------------------

    def type_ref(self, node: Any) -> TypeRef:
        packages: set[str] = set()
        local: set[str] = set()
        qualified = self._render(node, packages, local)
        text = _text(node)

        if node.type == "parenthesized_type" and node.named_children:
            return self.type_ref(node.named_children[0])
        if node.type == "type_identifier":
            return TypeRef(
                shape=TypeShape.IDENT,
                text=text,
                name=text,
                qualified_text=qualified,
                local_names=frozenset(local),
            )
        if node.type == "qualified_type":
            pkg = _text(node.child_by_field_name("package"))
            return TypeRef(
                shape=TypeShape.QUALIFIED,
                text=text,
                name=_text(node.child_by_field_name("name")),
                package=pkg,
                qualified_text=qualified,
                packages=frozenset(packages),
            )
        if node.type == "pointer_type" and node.named_children:
            return TypeRef(
                shape=TypeShape.POINTER,
                text=text,
                elem=self.type_ref(node.named_children[0]),
                qualified_text=qualified,
                packages=frozenset(packages),
                local_names=frozenset(local),
            )
        return TypeRef(
            shape=TypeShape.OTHER,
            text=text,
            qualified_text=qualified,
            packages=frozenset(packages),
            local_names=frozenset(local),
        )

    def _render(self, node: Any, packages: set[str], local: set[str]) -> str:
        """Rebuild a type's source text, qualifying package-local names."""
        if node.type == "type_identifier":
            name = _text(node)
            if name in BUILTIN_TYPES or name in self.type_params or not self.package:
                return name
            local.add(name)
            return f"{self.package}.{name}"
        if node.type == "qualified_type":
            packages.add(_text(node.child_by_field_name("package")))
            return _text(node)
        if node.child_count == 0:
            return _text(node)

        parts: list[str] = []
        cursor = node.start_byte
        for child in node.children:
            parts.append(self.source[cursor : child.start_byte].decode("utf-8"))
            parts.append(self._render(child, packages, local))
            cursor = child.end_byte
        parts.append(self.source[cursor : node.end_byte].decode("utf-8"))
        return "".join(parts)

    # ------------------------------------------------------------------
    # Field groupings
    # ------------------------------------------------------------------

    def parameter_list(self, node: Any | None) -> FieldList:
        if node is None:
            return FieldList()
        fields = [
            Field(
                names=tuple(_text(n) for n in child.children_by_field_name("name")),
                type=self.type_ref(child.child_by_field_name("type")),
                variadic=child.type == "variadic_parameter_declaration",
            )
            for child in node.named_children
            if child.type in _PARAM_DECLS and child.child_by_field_name("type") is not None
        ]
        return FieldList(tuple(fields))

    def result(self, node: Any | None) -> FieldList:
        if node is None:
            return FieldList()
        if node.type == "parameter_list":
            return self.parameter_list(node)
        # Single unnamed result: func GetWidget() *Widget
        return FieldList((Field(names=(), type=self.type_ref(node)),))

    def struct_fields(self, node: Any) -> FieldList:
        decl_list = next(
            (c for c in node.named_children if c.type == "field_declaration_list"), None
        )
        if decl_list is None:
            return FieldList()
        fields: list[Field] = []
        for decl in decl_list.named_children:
            if decl.type != "field_declaration":
                continue
            type_node = decl.child_by_field_name("type")
            if type_node is None:
                continue
            type_ref = self.type_ref(type_node)
            names = tuple(_text(n) for n in decl.children_by_field_name("name"))
            # Embedded *T: the star is an anonymous sibling of the type
            if not names and any(c.type == "*" for c in decl.children):
                type_ref = TypeRef(
                    shape=TypeShape.POINTER,
                    text=f"*{type_ref.text}",
                    elem=type_ref,
                    qualified_text=f"*{type_ref.qualified_text}",
                    packages=type_ref.packages,
                    local_names=type_ref.local_names,
                )
            tag = decl.child_by_field_name("tag")
            fields.append(Field(names=names, type=type_ref, tag=_text(tag) if tag else None))
        return FieldList(tuple(fields))

    def type_parameters(self, node: Any | None) -> FieldList | None:
        if node is None:
            return None
        fields = [
            Field(
                names=tuple(_text(n) for n in child.children_by_field_name("name")),
                type=self.type_ref(child.child_by_field_name("type")),
            )
            for child in node.named_children
            if child.type in ("type_parameter_declaration", "parameter_declaration")
            and child.child_by_field_name("type") is not None
        ]
        return FieldList(tuple(fields))

    # ------------------------------------------------------------------
    # Declarations
    # ------------------------------------------------------------------

    def interface(self, node: Any) -> InterfaceType:
        methods: list[MethodSpec] = []
        embeds: list[TypeRef] = []
        for child in node.named_children:
            if child.type in _METHOD_ELEMS:
                methods.append(
                    MethodSpec(
                        name=_text(child.child_by_field_name("name")),
                        params=self.parameter_list(child.child_by_field_name("parameters")),
                        results=self.result(child.child_by_field_name("result")),
                    )
                )
            elif child.type in _EMBED_ELEMS:
                # Union and ~T constraint elements carry several children
                named = child.named_children or [child]
                if len(named) == 1 and named[0].type in ("type_identifier", "qualified_type"):
                    embeds.append(self.type_ref(named[0]))
        return InterfaceType(methods=tuple(methods), embeds=tuple(embeds))

    def type_spec(self, node: Any) -> TypeSpec | None:
        name_node = node.child_by_field_name("name")
        type_node = node.child_by_field_name("type")
        if name_node is None or type_node is None:
            return None

        param_node = node.child_by_field_name("type_parameters")
        outer = self.type_params
        if param_node is not None:
            names = {
                _text(n)
                for p in param_node.named_children
                for n in p.children_by_field_name("name")
            }
            self.type_params = outer | names
        try:
            type_params = self.type_parameters(param_node)
            lowered: InterfaceType | StructType | TypeRef
            if type_node.type == "interface_type":
                lowered = self.interface(type_node)
            elif type_node.type == "struct_type":
                lowered = StructType(self.struct_fields(type_node))
            else:
                lowered = self.type_ref(type_node)
        finally:
            self.type_params = outer
        return TypeSpec(name=_text(name_node), type=lowered, type_params=type_params)

    def function(self, node: Any) -> FuncDecl:
        receiver = node.child_by_field_name("receiver")
        return FuncDecl(
            name=_text(node.child_by_field_name("name")),
            params=self.parameter_list(node.child_by_field_name("parameters")),
            results=self.result(node.child_by_field_name("result")),
            receiver=self.parameter_list(receiver) if receiver is not None else None,
        )

    def imports(self, node: Any) -> list[ImportSpec]:
        specs: list[ImportSpec] = []
        for child in node.named_children:
            if child.type == "import_spec_list":
                specs.extend(self.imports(child))
            elif child.type == "import_spec":
                alias = child.child_by_field_name("name")
                specs.append(
                    ImportSpec(
                        path=_unquote(_text(child.child_by_field_name("path"))),
                        name=_text(alias) if alias is not None else None,
                    )
                )
        return specs

    def source_file(self, path: str, root: Any) -> SourceFile:
        for child in root.named_children:
            if child.type == "package_clause":
                self.package = next(
                    (_text(c) for c in child.named_children if c.type == "package_identifier"),
                    "",
                )
                break

        imports: list[ImportSpec] = []
        decls: list[FuncDecl | TypeSpec] = []
        for child in root.named_children:
            if child.type == "import_declaration":
                imports.extend(self.imports(child))
            elif child.type in ("function_declaration", "method_declaration"):
                decls.append(self.function(child))
            elif child.type == "type_declaration":
                for spec_node in child.named_children:
                    if spec_node.type == "type_spec":
                        spec = self.type_spec(spec_node)
                        if spec is not None:
                            decls.append(spec)
        return SourceFile(
            path=path, package=self.package, imports=tuple(imports), decls=tuple(decls)
        )


@dataclass
class TreeSitterParser:
    """Tree-sitter parser for Go declaration structure."""

    _parser: Any = field(default=None, repr=False)

    def __post_init__(self) -> None:
        try:
            language = go_language()
        except (AttributeError, TypeError, ValueError) as e:
            raise ParseError.grammar_unavailable(str(e)) from e
        self._parser = tree_sitter.Parser(language)

    def parse(self, path: Path, content: bytes | None = None) -> SourceFile:
        """Parse one file into a :class:`SourceFile`.

        Raises:
            ParseError: The file is unreadable, is not valid UTF-8, or contains
                syntax errors.
        """
        if content is None:
            try:
                content = path.read_bytes()
            except OSError as e:
                raise ParseError.read_failed(str(path), e.strerror or str(e)) from e

        try:
            content.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ParseError.invalid_encoding(str(path), e.start) from e

        tree = self._parser.parse(content)
        root = tree.root_node
        if root.has_error:
            bad = _first_error(root) or root
            row, col = bad.start_point
            raise ParseError.syntax_error(str(path), row + 1, col + 1)

        return _Lowering(source=content).source_file(str(path), root)
