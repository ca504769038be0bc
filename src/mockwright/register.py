"""Dependency-injection registration synthesis.

One source file in the tree plays the role of *provider*: it declares a
``Get<Name>`` function returning the interface, and a parameter object that
embeds ``<pkg>.In`` next to a tagged field naming the dependency. From that
file four strings are extracted and rendered into ``register.go``:

    import_path     directory of the provider, minus the module source root
    package_alias   last segment of import_path
    interface_name  first result type of the Get function (pointer unwrapped)
    dependency_key  first quoted substring of the tagged field's tag

Extraction is a fixed-shape match over the declaration tree. Missing pieces
yield empty strings and a warning; the file is still rendered.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

import structlog

from mockwright.config.constants import DI_SUPPORT_IMPORT, GETTER_PREFIX, IN_MARKER
from mockwright.core.errors import OutputError
from mockwright.parsing.nodes import (
    FieldList,
    FuncDecl,
    Node,
    NodeVisitor,
    SourceFile,
    TypeShape,
    walk,
)

log = structlog.get_logger(__name__)

REGISTER_TEMPLATE = (
    "\n"
    "package mocks\n"
    "\n"
    "import (\n"
    '\t"%s"\n'
    "\t\n"
    f'\t"{DI_SUPPORT_IMPORT}"\n'
    ")\n"
    "\t\n"
    "func RegisterMock(m *dimanager.Manager) *%s {\n"
    "\tmockObj := &%s{}\n"
    '\tm.ProvideMock(func() %s.%s { return mockObj }, "%s")\n'
    "\treturn mockObj\n"
    "}\n"
)


@dataclass(frozen=True, slots=True)
class RegistrationEntry:
    """The provider file selected during parsing."""

    file_name: str
    syntax: SourceFile


@dataclass(frozen=True, slots=True)
class RegistrationFields:
    import_path: str
    package_alias: str
    interface_name: str
    dependency_key: str


# ----------------------------------------------------------------------
# Module root resolution
# ----------------------------------------------------------------------


class ModuleRootResolver(Protocol):
    """Returns the source root stripped from directories to form import paths."""

    def __call__(self) -> str: ...


@dataclass(frozen=True, slots=True)
class StaticRootResolver:
    root: str

    def __call__(self) -> str:
        return self.root.rstrip("/") + "/"


class GopathRootResolver:
    """``$GOPATH/src/``, with Go's default of ``~/go`` when GOPATH is unset."""

    def __call__(self) -> str:
        gopath = os.environ.get("GOPATH") or str(Path.home() / "go")
        first = gopath.split(os.pathsep)[0]
        return "/".join([first.rstrip("/"), "src", ""])


def import_path_for(directory: str, root: str) -> str:
    """Strip ``root`` from the front of ``directory``."""
    if root and directory.startswith(root):
        return directory[len(root) :]
    log.warning("outside_module_root", directory=directory, root=root)
    return directory


# ----------------------------------------------------------------------
# Structural matching
# ----------------------------------------------------------------------


def _is_in_grouping(node: Node) -> bool:
    """Exactly two members: the ``<pkg>.In`` marker, then the tagged dependency."""
    return (
        isinstance(node, FieldList)
        and len(node) == 2
        and node.fields[0].type.is_selector(IN_MARKER)
    )


def is_registration_candidate(source: SourceFile) -> bool:
    """Provider convention: a top-level ``Get*`` function plus an ``In`` grouping."""
    has_getter = any(f.name.startswith(GETTER_PREFIX) for f in source.functions())
    return has_getter and any(_is_in_grouping(n) for n in walk(source))


def _result_type_name(func: FuncDecl) -> str:
    if not func.results.fields:
        return ""
    ref = func.results.fields[0].type
    if ref.shape is TypeShape.POINTER and ref.elem is not None:
        ref = ref.elem
    return ref.name if ref.shape is TypeShape.IDENT else ""


def _tag_key(tag: str | None) -> str:
    if not tag:
        return ""
    parts = tag.split('"')
    return parts[1] if len(parts) > 1 else ""


class _RegistrationMatcher(NodeVisitor):
    """Collects the interface name and dependency key; first match wins."""

    def __init__(self, file_name: str) -> None:
        self.file_name = file_name
        self.interface_name: str | None = None
        self.dependency_key: str | None = None

    def visit_func_decl(self, node: FuncDecl) -> None:
        if node.receiver is None and node.name.startswith(GETTER_PREFIX):
            if self.interface_name is None:
                self.interface_name = _result_type_name(node)
                if not self.interface_name:
                    log.warning(
                        "getter_result_not_simple", file=self.file_name, function=node.name
                    )
            else:
                log.warning("extra_getter_ignored", file=self.file_name, function=node.name)
        self.generic_visit(node)

    def visit_field_list(self, node: FieldList) -> None:
        if _is_in_grouping(node):
            if self.dependency_key is None:
                self.dependency_key = _tag_key(node.fields[1].tag)
            else:
                log.warning("extra_in_grouping_ignored", file=self.file_name)
        self.generic_visit(node)


def extract_registration(entry: RegistrationEntry, root: str) -> RegistrationFields:
    """Derive the four template fields from a provider file."""
    matcher = _RegistrationMatcher(entry.file_name)
    matcher.visit(entry.syntax)

    if matcher.interface_name is None:
        log.warning("getter_missing", file=entry.file_name)
    if matcher.dependency_key is None:
        log.warning("in_grouping_missing", file=entry.file_name)

    import_path = import_path_for(os.path.dirname(os.path.abspath(entry.file_name)), root)
    return RegistrationFields(
        import_path=import_path,
        package_alias=os.path.basename(import_path),
        interface_name=matcher.interface_name or "",
        dependency_key=matcher.dependency_key or "",
    )


# ----------------------------------------------------------------------
# Rendering
# ----------------------------------------------------------------------


def render_register(fields: RegistrationFields) -> str:
    name = fields.interface_name
    return REGISTER_TEMPLATE % (
        fields.import_path,
        name,
        name,
        fields.package_alias,
        name,
        fields.dependency_key,
    )


def write_register(text: str, path: Path) -> None:
    """Overwrite ``path`` with ``text``. Any failure is fatal."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    except OSError as e:
        raise OutputError.write_failed(str(path), e.strerror or str(e)) from e


class RegistrationSynthesizer:
    """Extract, render and write the registration file for one run."""

    def __init__(self, output_path: str | Path, root_resolver: ModuleRootResolver) -> None:
        self.output_path = Path(output_path)
        self.root_resolver = root_resolver

    def synthesize(self, entry: RegistrationEntry) -> RegistrationFields:
        fields = extract_registration(entry, self.root_resolver())
        text = render_register(fields)
        log.debug("register_rendered", path=str(self.output_path), text=text)
        write_register(text, self.output_path)
        log.info(
            "register_written",
            path=str(self.output_path),
            interface=fields.interface_name,
            dependency_key=fields.dependency_key,
        )
        return fields
