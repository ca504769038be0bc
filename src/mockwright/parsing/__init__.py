"""Parsing: Go source to declaration tree."""

from mockwright.parsing.nodes import (
    Field,
    FieldList,
    FuncDecl,
    ImportSpec,
    InterfaceType,
    MethodSpec,
    NodeKind,
    NodeVisitor,
    SourceFile,
    StructType,
    TypeRef,
    TypeShape,
    TypeSpec,
    walk,
)
from mockwright.parsing.treesitter import TreeSitterParser

__all__ = [
    "Field",
    "FieldList",
    "FuncDecl",
    "ImportSpec",
    "InterfaceType",
    "MethodSpec",
    "NodeKind",
    "NodeVisitor",
    "SourceFile",
    "StructType",
    "TreeSitterParser",
    "TypeRef",
    "TypeShape",
    "TypeSpec",
    "walk",
]
