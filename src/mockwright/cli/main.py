"""mockwright CLI - generate testify mocks for Go interfaces."""

import re
from typing import Any

import click
import structlog

from mockwright.config.loader import load_config
from mockwright.config.models import MockwrightConfig
from mockwright.core.errors import MockwrightError
from mockwright.core.logging import configure_logging, set_run_id
from mockwright.core.progress import pluralize, status
from mockwright.outputs import FileOutputStreamProvider, OutputStreamProvider, StdoutStreamProvider
from mockwright.register import (
    GopathRootResolver,
    ModuleRootResolver,
    RegistrationSynthesizer,
    StaticRootResolver,
)
from mockwright.visitor import GeneratorVisitor
from mockwright.walker import MATCH_ALL, Walker, WalkConfig

log = structlog.get_logger(__name__)


def _overrides(
    *,
    inpkg: bool,
    output: str | None,
    outpkg: str | None,
    print_stdout: bool,
    note: str | None,
    case: str | None,
    register: bool | None,
    module_root: str | None,
    verbose: bool,
) -> dict[str, Any]:
    """Config sections for the options actually given on the command line."""
    generate: dict[str, Any] = {}
    if inpkg:
        generate["in_package"] = True
    if output is not None:
        generate["output_dir"] = output
    if outpkg is not None:
        generate["package_name"] = outpkg
    if print_stdout:
        generate["print_stdout"] = True
    if note is not None:
        generate["note"] = note
    if case is not None:
        generate["case"] = case

    register_section: dict[str, Any] = {}
    if register is not None:
        register_section["enabled"] = register
    if module_root is not None:
        register_section["module_root"] = module_root

    overrides: dict[str, Any] = {}
    if generate:
        overrides["generate"] = generate
    if register_section:
        overrides["registration"] = register_section
    if verbose:
        overrides["logging"] = {"level": "DEBUG"}
    return overrides


def _build_visitor(config: MockwrightConfig) -> GeneratorVisitor:
    gen = config.generate
    osp: OutputStreamProvider
    if gen.print_stdout:
        osp = StdoutStreamProvider()
    else:
        osp = FileOutputStreamProvider(
            base_dir=gen.output_dir, in_package=gen.in_package, case=gen.case
        )

    resolver: ModuleRootResolver
    if config.registration.module_root:
        resolver = StaticRootResolver(config.registration.module_root)
    else:
        resolver = GopathRootResolver()

    registrar = None
    if config.registration.enabled:
        registrar = RegistrationSynthesizer(config.registration.output_path, resolver)

    return GeneratorVisitor(
        in_package=gen.in_package,
        note=gen.note,
        osp=osp,
        root_resolver=resolver,
        package_name=gen.package_name,
        registrar=registrar,
    )


@click.command()
@click.version_option(version="0.1.0", prog_name="mockwright")
@click.option("--name", help="Name (or regexp) of the interface to mock")
@click.option("--all", "all_", is_flag=True, help="Mock every interface (implies -r)")
@click.option(
    "--dir",
    "base_dir",
    default=".",
    show_default=True,
    type=click.Path(file_okay=False),
    help="Directory to search for interfaces",
)
@click.option("-r", "--recursive", is_flag=True, help="Recurse into subdirectories")
@click.option("--inpkg", is_flag=True, help="Write mocks beside each interface, in its package")
@click.option("--output", help="Directory for mocks [default: ./mocks]")
@click.option("--outpkg", help="Package name for generated mocks [default: mocks]")
@click.option("--print", "print_stdout", is_flag=True, help="Print mocks to stdout")
@click.option("--note", help="Comment to insert into every mock (\\n separates lines)")
@click.option(
    "--case",
    type=click.Choice(["camel", "underscore"]),
    help="Mock file name casing [default: camel]",
)
@click.option("--tags", default="", help="Space-separated build tags (carried, not evaluated)")
@click.option(
    "--register/--no-register",
    default=None,
    help="Synthesize register.go from the provider file [default: on]",
)
@click.option(
    "--module-root",
    help="Source root stripped to form import paths [default: $GOPATH/src]",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
def cli(
    name: str | None,
    all_: bool,
    base_dir: str,
    recursive: bool,
    inpkg: bool,
    output: str | None,
    outpkg: str | None,
    print_stdout: bool,
    note: str | None,
    case: str | None,
    tags: str,
    register: bool | None,
    module_root: str | None,
    verbose: bool,
) -> None:
    """mockwright - mocks for Go interfaces plus a DI registration file."""
    if name and all_:
        raise click.UsageError("Specify --name or --all, but not both")
    if not name and not all_:
        raise click.UsageError("Use --name to specify the interface, or --all for every one")

    if all_:
        pattern = MATCH_ALL
        recursive = True
    else:
        try:
            pattern = re.compile(f"^{name}$")
        except re.error as e:
            raise click.BadParameter(str(e), param_hint="--name") from e

    set_run_id()
    configure_logging(level="DEBUG" if verbose else "WARNING")
    try:
        config = load_config(
            **_overrides(
                inpkg=inpkg,
                output=output,
                outpkg=outpkg,
                print_stdout=print_stdout,
                note=note,
                case=case,
                register=register,
                module_root=module_root,
                verbose=verbose,
            )
        )
    except MockwrightError as e:
        status(str(e), style="error")
        raise SystemExit(1) from e
    configure_logging(config=config.logging)

    walk_config = WalkConfig(
        base_dir=base_dir,
        recursive=recursive,
        filter=pattern,
        limit_one=not all_,
        build_tags=tuple(tags.split()),
    )
    visitor = _build_visitor(config)
    log.debug("walk_start", base_dir=base_dir, filter=pattern.pattern, recursive=recursive)

    try:
        generated = Walker(walk_config).walk(visitor)
    except MockwrightError as e:
        log.error("walk_aborted", **e.to_dict())
        status(str(e), style="error")
        raise SystemExit(1) from e

    if name and not generated:
        status(f"Unable to find {name} in any go files under this path", style="error")
        raise SystemExit(1)

    status(f"Generated {pluralize(len(visitor.generated), 'mock')}", style="success")


if __name__ == "__main__":
    cli()
