"""Mock body generation for one interface.

Produces a testify-style mock::

    // Code generated by mockwright. DO NOT EDIT.

    package mocks

    import mock "github.com/stretchr/testify/mock"

    // Widget is an autogenerated mock type for the Widget type
    type Widget struct {
    	mock.Mock
    }

    // Name provides a mock function with given fields: id
    func (_m *Widget) Name(id int) (string, error) { ... }

The generator works on the declaration tree only. Types are spelled from
source; outside the declaring package, package-local names are qualified with
the declaring package name and that package is imported.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TextIO

from mockwright.catalog import InterfaceRecord
from mockwright.config.constants import GENERATED_BANNER, TESTIFY_MOCK_IMPORT
from mockwright.core.errors import GenerateError
from mockwright.parsing.nodes import Field, FieldList, MethodSpec


@dataclass(frozen=True, slots=True)
class _Params:
    names: list[str]
    types: list[str]  # as written in a func type, "...T" for variadic
    variadic: bool

    def call_args(self) -> str:
        if self.variadic and self.names:
            return ", ".join([*self.names[:-1], f"{self.names[-1]}..."])
        return ", ".join(self.names)


class Generator:
    """Renders a mock for one :class:`InterfaceRecord` into a buffer."""

    def __init__(
        self,
        iface: InterfaceRecord,
        pkg: str,
        in_package: bool,
        *,
        source_import: Callable[[], str] | None = None,
    ) -> None:
        self.iface = iface
        self.pkg = pkg
        self.in_package = in_package
        self.source_import = source_import
        self._buf: list[str] = []

    def _printf(self, fmt: str, *args: object) -> None:
        self._buf.append(fmt % args if args else fmt)

    def _type(self, field: Field) -> str:
        return field.type.render(qualified=not self.in_package)

    # ------------------------------------------------------------------
    # Prologue
    # ------------------------------------------------------------------

    def generate_prologue_note(self, note: str) -> None:
        self._printf("%s\n", GENERATED_BANNER)
        if note:
            self._printf("\n")
            for line in note.replace("\\n", "\n").splitlines():
                self._printf("// %s\n", line)
        self._printf("\n")

    def generate_prologue(self, pkg: str) -> None:
        package = self.iface.package if self.in_package else pkg
        self._printf("package %s\n\n", package)

        imports = self._imports()
        if len(imports) == 1:
            self._printf("import %s\n\n", imports[0])
        else:
            self._printf("import (\n")
            for spec in imports:
                self._printf("\t%s\n", spec)
            self._printf(")\n\n")

    def _signature_fields(self) -> list[Field]:
        fields: list[Field] = []
        for method in self.iface.methods:
            fields.extend(method.params.fields)
            fields.extend(method.results.fields)
        if self.iface.type_params is not None:
            fields.extend(self.iface.type_params.fields)
        return fields

    def _imports(self) -> list[str]:
        fields = self._signature_fields()
        used_packages = {p for f in fields for p in f.type.packages}
        needs_source = not self.in_package and any(f.type.local_names for f in fields)

        lines = [f'mock "{TESTIFY_MOCK_IMPORT}"']
        if needs_source:
            import_path = self.source_import() if self.source_import else ""
            if not import_path:
                raise GenerateError.failed(
                    self.iface.name, "no import path known for the declaring package"
                )
            lines.append(f'{self.iface.package} "{import_path}"')
        for spec in self.iface.imports:
            if spec.name in (".", "_"):
                continue
            if spec.local_name in used_packages:
                alias = f"{spec.name} " if spec.name else ""
                lines.append(f'{alias}"{spec.path}"')
        return lines

    # ------------------------------------------------------------------
    # Body
    # ------------------------------------------------------------------

    def _type_params(self) -> tuple[str, str]:
        """Declaration and use forms, e.g. ``[K comparable, V any]`` and ``[K, V]``."""
        params = self.iface.type_params
        if params is None or not params.fields:
            return "", ""
        decl = ", ".join(f"{', '.join(f.names)} {self._type(f)}" for f in params.fields)
        use = ", ".join(name for f in params.fields for name in f.names)
        return f"[{decl}]", f"[{use}]"

    def _params(self, params: FieldList) -> _Params:
        names: list[str] = []
        types: list[str] = []
        variadic = False
        for field in params.fields:
            type_text = self._type(field)
            if field.variadic:
                type_text = f"...{type_text}"
                variadic = True
            for name in field.names or ("",):
                if not name or name == "_":
                    name = f"_a{len(names)}"
                names.append(name)
                types.append(type_text)
        return _Params(names=names, types=types, variadic=variadic)

    def _results(self, results: FieldList) -> list[str]:
        return [self._type(f) for f in results.fields for _ in (f.names or ("",))]

    def generate(self) -> None:
        if self.iface.unresolved:
            raise GenerateError.unresolved_embed(self.iface.name, self.iface.unresolved[0])

        name = self.iface.name
        decl, use = self._type_params()
        self._printf("// %s is an autogenerated mock type for the %s type\n", name, name)
        self._printf("type %s%s struct {\n\tmock.Mock\n}\n\n", name, decl)

        for method in self.iface.methods:
            self._method(method, f"{name}{use}")

    def _method(self, method: MethodSpec, receiver: str) -> None:
        params = self._params(method.params)
        returns = self._results(method.results)

        signature = ", ".join(
            f"{n} {t}" for n, t in zip(params.names, params.types, strict=True)
        )
        if len(returns) == 0:
            result_decl = ""
        elif len(returns) == 1:
            result_decl = f" {returns[0]}"
        else:
            result_decl = f" ({', '.join(returns)})"

        self._printf(
            "// %s provides a mock function with given fields: %s\n",
            method.name,
            ", ".join(params.names),
        )
        self._printf("func (_m *%s) %s(%s)%s {\n", receiver, method.name, signature, result_decl)

        called_args = ", ".join(params.names)
        if not returns:
            self._printf("\t_m.Called(%s)\n", called_args)
            self._printf("}\n\n")
            return

        self._printf("\tret := _m.Called(%s)\n\n", called_args)
        rf_type = f"func({', '.join(params.types)}){result_decl}"
        if len(returns) > 1:
            self._printf("\tif rf, ok := ret.Get(0).(%s); ok {\n", rf_type)
            self._printf("\t\treturn rf(%s)\n", params.call_args())
            self._printf("\t}\n\n")

        for idx, typ in enumerate(returns):
            single = f"func({', '.join(params.types)}) {typ}"
            self._printf("\tvar r%d %s\n", idx, typ)
            self._printf("\tif rf, ok := ret.Get(%d).(%s); ok {\n", idx, single)
            self._printf("\t\tr%d = rf(%s)\n", idx, params.call_args())
            self._printf("\t} else ")
            if typ == "error":
                self._printf("{\n\t\tr%d = ret.Error(%d)\n\t}\n\n", idx, idx)
            else:
                self._printf("if ret.Get(%d) != nil {\n", idx)
                self._printf("\t\tr%d = ret.Get(%d).(%s)\n\t}\n\n", idx, idx, typ)

        self._printf("\treturn %s\n", ", ".join(f"r{i}" for i in range(len(returns))))
        self._printf("}\n\n")

    def write(self, out: TextIO) -> None:
        out.write("".join(self._buf).rstrip("\n") + "\n")
