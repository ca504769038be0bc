"""Per-interface mock dispatch and registration hand-off."""

from __future__ import annotations

import os
from functools import partial

import structlog

from mockwright.catalog import InterfaceRecord
from mockwright.config.constants import DEFAULT_MOCK_PACKAGE
from mockwright.core.errors import MockwrightError
from mockwright.core.progress import status
from mockwright.generator import Generator
from mockwright.outputs import OutputStreamProvider
from mockwright.register import (
    ModuleRootResolver,
    RegistrationEntry,
    RegistrationSynthesizer,
    import_path_for,
)

log = structlog.get_logger(__name__)


class GeneratorVisitor:
    """Generates one mock per visited interface.

    Args:
        in_package: Place each mock beside its interface, in the same package.
        note: Comment text prepended to every mock.
        osp: Source of writers, one per interface.
        package_name: Package clause for mocks outside the source package.
        root_resolver: Module source root, used to import the source package.
        registrar: Writes the registration file; None disables it.
    """

    def __init__(
        self,
        *,
        in_package: bool,
        note: str,
        osp: OutputStreamProvider,
        root_resolver: ModuleRootResolver,
        package_name: str = DEFAULT_MOCK_PACKAGE,
        registrar: RegistrationSynthesizer | None = None,
    ) -> None:
        self.in_package = in_package
        self.note = note
        self.osp = osp
        self.root_resolver = root_resolver
        self.package_name = package_name
        self.registrar = registrar
        self.generated: list[str] = []
        self._import_paths: dict[str, str] = {}

    def generate_mock_register(self, entry: RegistrationEntry) -> None:
        if self.registrar is None:
            log.debug("register_disabled", file=entry.file_name)
            return
        self.registrar.synthesize(entry)
        status(f"Wrote {self.registrar.output_path}", style="success")

    def _import_path(self, source_dir: str) -> str:
        """Import path of a source directory, resolved once per directory."""
        if source_dir not in self._import_paths:
            self._import_paths[source_dir] = import_path_for(source_dir, self.root_resolver())
        return self._import_paths[source_dir]

    def visit_walk(self, iface: InterfaceRecord) -> bool:
        """Generate one mock.

        Returns False when generation hit an unexpected fault; that fault is
        logged and swallowed so the remaining interfaces still get a chance.
        The mock is rendered before a writer is acquired, so a failed
        interface leaves no output file behind. ``MockwrightError`` (writer
        acquisition, explicit generation failure) propagates and ends the run.
        """
        bound = log.bind(interface=iface.name, file=iface.file_name)
        source_dir = os.path.dirname(os.path.abspath(iface.file_name))
        pkg = source_dir if self.in_package else self.package_name

        try:
            gen = Generator(
                iface,
                pkg,
                self.in_package,
                source_import=None if self.in_package else partial(self._import_path, source_dir),
            )
            gen.generate_prologue_note(self.note)
            gen.generate_prologue(pkg)
            gen.generate()
        except MockwrightError:
            raise
        except Exception as e:
            bound.exception("mock_generation_failed")
            status(f"Unable to generate mock for '{iface.name}': {e}", style="error")
            return False

        with self.osp.get_writer(iface) as out:
            gen.write(out)

        self.generated.append(iface.name)
        bound.info("mock_generated")
        return True
