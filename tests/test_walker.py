"""Tests for the source tree scanner and walk orchestration."""

import re
from collections.abc import Callable, Sequence
from pathlib import Path

import pytest

from mockwright.catalog import InterfaceRecord
from mockwright.parsing.parser import Parser
from mockwright.register import RegistrationEntry
from mockwright.walker import Walker, WalkConfig, is_source_file

GoWriter = Callable[[str, str], Path]

PROVIDER = """package widget

import "go.uber.org/dig"

type Widget interface {
	Name() string
}

type Params struct {
	dig.In
	Widget Widget `name:"widget-key"`
}

func GetWidget(p Params) *Widget {
	return nil
}
"""


def _iface(pkg: str, *names: str) -> str:
    body = "".join(f"\ntype {n} interface {{\n\tDo()\n}}\n" for n in names)
    return f"package {pkg}\n{body}"


class RecordingVisitor:
    """Records visits; interfaces named in ``fail`` report failure."""

    def __init__(self, fail: Sequence[str] = ()) -> None:
        self.fail = set(fail)
        self.visited: list[str] = []
        self.entries: list[RegistrationEntry] = []

    def visit_walk(self, iface: InterfaceRecord) -> bool:
        self.visited.append(iface.name)
        return iface.name not in self.fail

    def generate_mock_register(self, entry: RegistrationEntry) -> None:
        self.entries.append(entry)


class SpyParser(Parser):
    """Parser that remembers which files it was asked to parse."""

    parsed: list[str]

    def __init__(self, build_tags: Sequence[str] = ()) -> None:
        super().__init__(build_tags)
        self.parsed = []
        SpyParser.last = self

    def parse(self, path: str) -> list[InterfaceRecord]:
        self.parsed.append(Path(path).name)
        return super().parse(path)


def _walk(base: Path, **kwargs: object) -> tuple[bool, RecordingVisitor, SpyParser]:
    visitor = RecordingVisitor(fail=kwargs.pop("fail", ()))  # type: ignore[arg-type]
    config = WalkConfig(base_dir=str(base), **kwargs)  # type: ignore[arg-type]
    walker = Walker(config, parser_factory=SpyParser)
    generated = walker.walk(visitor)
    return generated, visitor, SpyParser.last


class TestIsSourceFile:
    @pytest.mark.parametrize(
        ("name", "expected"),
        [("types.go", True), ("types_test.go", False), ("types.go.bak", False), ("go.mod", False)],
    )
    def test_suffix_rules(self, name: str, expected: bool) -> None:
        assert is_source_file(name) is expected


class TestScanner:
    """Directory traversal rules."""

    def test_non_recursive_never_descends(self, tmp_path: Path, write_go: GoWriter) -> None:
        write_go("a.go", _iface("p", "Top"))
        write_go("sub/b.go", _iface("sub", "Nested"))

        _, visitor, parser = _walk(tmp_path)

        assert visitor.visited == ["Top"]
        assert parser.parsed == ["a.go"]

    def test_recursive_descends_in_sorted_order(self, tmp_path: Path, write_go: GoWriter) -> None:
        """Entries are processed in name order, depth first."""
        write_go("z.go", _iface("p", "Z"))
        write_go("m/inner.go", _iface("m", "M"))
        write_go("a.go", _iface("p", "A"))

        _, visitor, _ = _walk(tmp_path, recursive=True)

        assert visitor.visited == ["A", "M", "Z"]

    def test_dot_and_underscore_entries_are_skipped(
        self, tmp_path: Path, write_go: GoWriter
    ) -> None:
        write_go(".hidden/h.go", _iface("h", "Hidden"))
        write_go("_vendor/v.go", _iface("v", "Vendored"))
        write_go("_gen.go", _iface("p", "Gen"))
        write_go(".dot.go", _iface("p", "Dot"))
        write_go("ok.go", _iface("p", "Ok"))

        _, visitor, parser = _walk(tmp_path, recursive=True)

        assert visitor.visited == ["Ok"]
        assert parser.parsed == ["ok.go"]

    def test_test_files_are_never_parsed(self, tmp_path: Path, write_go: GoWriter) -> None:
        """pkgX/types.go (Foo) + pkgX/types_test.go (Bar) yields only Foo."""
        write_go("pkgX/types.go", _iface("pkgX", "Foo"))
        write_go("pkgX/types_test.go", _iface("pkgX", "Bar"))

        generated, visitor, parser = _walk(tmp_path, recursive=True, filter=re.compile(".*"))

        assert generated is True
        assert visitor.visited == ["Foo"]
        assert parser.parsed == ["types.go"]

    def test_parse_failure_skips_file(self, tmp_path: Path, write_go: GoWriter) -> None:
        """A broken file does not stop the scan."""
        write_go("a_bad.go", "package p\n\ntype Broken interface {\n")
        write_go("b_good.go", _iface("p", "Good"))

        _, visitor, parser = _walk(tmp_path)

        assert visitor.visited == ["Good"]
        assert parser.parsed == ["a_bad.go", "b_good.go"]

    def test_invalid_utf8_file_is_skipped(self, tmp_path: Path) -> None:
        """A file that is not UTF-8 is reported and skipped like any parse failure."""
        (tmp_path / "a.go").write_bytes(b'package p\n\ntype S struct {\n\tX int `json:"\xe9"`\n}\n')
        (tmp_path / "b.go").write_text(_iface("p", "Foo"))

        generated, visitor, parser = _walk(tmp_path)

        assert generated is True
        assert visitor.visited == ["Foo"]
        assert parser.parsed == ["a.go", "b.go"]

    def test_unreadable_base_dir(self, tmp_path: Path) -> None:
        generated, visitor, _ = _walk(tmp_path / "missing")

        assert generated is False
        assert visitor.visited == []

    def test_limit_one_stops_scan_after_first_match(
        self, tmp_path: Path, write_go: GoWriter
    ) -> None:
        """Files after the first matching file are never parsed."""
        write_go("a.go", _iface("p", "Other"))
        write_go("b.go", _iface("p", "Foo"))
        write_go("c.go", _iface("p", "Foo2"))

        _, visitor, parser = _walk(tmp_path, filter=re.compile("^Foo$"), limit_one=True)

        assert parser.parsed == ["a.go", "b.go"]
        assert visitor.visited == ["Foo"]

    def test_limit_one_propagates_out_of_subdirectories(
        self, tmp_path: Path, write_go: GoWriter
    ) -> None:
        write_go("a/deep/x.go", _iface("deep", "Foo"))
        write_go("b/y.go", _iface("b", "Foo"))
        write_go("z.go", _iface("p", "Foo"))

        _, visitor, parser = _walk(
            tmp_path, recursive=True, filter=re.compile("^Foo$"), limit_one=True
        )

        assert parser.parsed == ["x.go"]
        assert visitor.visited == ["Foo"]


class TestDispatch:
    """Filtering and visiting the catalog."""

    def test_limit_one_yields_exactly_one_visit(
        self, tmp_path: Path, write_go: GoWriter
    ) -> None:
        write_go("a.go", _iface("p", "A", "B", "C"))

        generated, visitor, _ = _walk(tmp_path, limit_one=True)

        assert generated is True
        assert visitor.visited == ["A"]

    def test_without_limit_every_match_in_order(
        self, tmp_path: Path, write_go: GoWriter
    ) -> None:
        write_go("a.go", _iface("p", "A", "B"))
        write_go("b.go", _iface("p", "C"))

        _, visitor, _ = _walk(tmp_path)

        assert visitor.visited == ["A", "B", "C"]

    def test_filter_is_unanchored(self, tmp_path: Path, write_go: GoWriter) -> None:
        write_go("a.go", _iface("p", "UserStore", "Cache", "StoreFront"))

        _, visitor, _ = _walk(tmp_path, filter=re.compile("Store"))

        assert visitor.visited == ["UserStore", "StoreFront"]

    def test_failure_does_not_block_later_interfaces(
        self, tmp_path: Path, write_go: GoWriter
    ) -> None:
        """A failed visit for A still lets B be generated, even with limit_one."""
        write_go("a.go", _iface("p", "A", "B", "C"))

        generated, visitor, _ = _walk(tmp_path, limit_one=True, fail=["A"])

        assert generated is True
        assert visitor.visited == ["A", "B"]

    def test_nothing_generated(self, tmp_path: Path, write_go: GoWriter) -> None:
        write_go("a.go", _iface("p", "A"))

        generated, visitor, _ = _walk(tmp_path, filter=re.compile("^Missing$"))

        assert generated is False
        assert visitor.visited == []


class TestRegistration:
    """Registration hand-off after the scan."""

    def test_provider_triggers_register_once(
        self, tmp_path: Path, write_go: GoWriter
    ) -> None:
        provider = write_go("widget/provider.go", PROVIDER)
        write_go("zz/provider.go", PROVIDER)

        _, visitor, _ = _walk(tmp_path, recursive=True)

        assert [e.file_name for e in visitor.entries] == [str(provider)]

    def test_no_provider_no_register(self, tmp_path: Path, write_go: GoWriter) -> None:
        write_go("a.go", _iface("p", "A"))

        _, visitor, _ = _walk(tmp_path)

        assert visitor.entries == []

    def test_build_tags_reach_parser(self, tmp_path: Path, write_go: GoWriter) -> None:
        write_go("a.go", _iface("p", "A"))

        _, _, parser = _walk(tmp_path, build_tags=("linux", "integration"))

        assert parser.build_tags == ("linux", "integration")
