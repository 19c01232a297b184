"""Click CLI with resolve, list, graph, and serve subcommands."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click

from buildplan import __version__
from buildplan.analysis import Planner
from buildplan.errors import BuildPlanError
from buildplan.exporter import emit, write_plan
from buildplan.models import Configuration, ResolverConfig
from buildplan.pipeline import load_workspace

_CONFIGURATION_CHOICES = [c.value for c in Configuration]

_config_option = click.option(
    "--config", "-c", "source",
    type=click.Path(path_type=Path),
    envvar="BUILDPLAN_CONFIG",
    default="buildplan.json",
    show_default=True,
    help="Declarations JSON file, or a directory of *.Target.cs / *.Build.cs rules",
)
_external_option = click.option(
    "--external", "-x", "external", multiple=True,
    help="Module provided outside the declarations (repeatable)",
)


def _fail(error: BuildPlanError):
    click.echo(click.style(f"error: {error}", fg="red"), err=True)
    sys.exit(error.exit_code)


def _configuration(value: str) -> Configuration:
    try:
        return Configuration(value.lower())
    except ValueError:
        raise click.ClickException(
            f"Unknown configuration {value!r}; choose from {', '.join(_CONFIGURATION_CHOICES)}"
        ) from None


def _load(source: Path, external: tuple[str, ...], defer: bool = False) -> Planner:
    config = ResolverConfig(source=source, external_modules=list(external), defer_validation=defer)
    return load_workspace(config)


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", count=True, help="Log progress (-vv for debug)")
def cli(verbose: int):
    """buildplan: Resolve build targets into ordered module plans."""
    level = logging.WARNING
    if verbose == 1:
        level = logging.INFO
    elif verbose > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s", stream=sys.stderr)


@cli.command()
@click.argument("target")
@click.argument("configuration", default=Configuration.DEVELOPMENT.value)
@_config_option
@_external_option
@click.option("-o", "--output", type=click.Path(dir_okay=False, path_type=Path),
              help="Write the plan to a file instead of stdout")
@click.option("--defer-validation", is_flag=True, help="Check target module names at resolve time")
def resolve(target: str, configuration: str, source: Path, external: tuple[str, ...],
            output: Path | None, defer_validation: bool):
    """Print the build plan for TARGET in CONFIGURATION (debug, development, shipping)."""
    build_configuration = _configuration(configuration)
    try:
        planner = _load(source, external, defer_validation)
        plan = planner.plan(target, build_configuration)
    except BuildPlanError as e:
        _fail(e)

    if output:
        try:
            write_plan(plan, output)
        except OSError as e:
            raise click.ClickException(f"Cannot write plan to {output}: {e}")
        click.echo(f"Wrote {len(plan.entries)} module(s) to {output}", err=True)
    else:
        click.echo(emit(plan), nl=False)


@cli.command(name="list")
@_config_option
@_external_option
def list_declarations(source: Path, external: tuple[str, ...]):
    """List declared targets and modules."""
    try:
        planner = _load(source, external)
    except BuildPlanError as e:
        _fail(e)

    click.echo(click.style("Targets:", bold=True))
    for target in planner.targets:
        click.echo(
            f"  {click.style(target.name, fg='cyan')}  "
            f"{click.style(target.build_type.value, fg='yellow')}  "
            f"{', '.join(target.modules)}"
        )
    click.echo(click.style("Modules:", bold=True))
    for module in planner.modules:
        deps = ", ".join(module.dependencies) or "-"
        click.echo(
            f"  {click.style(module.name, fg='green')}  "
            f"{click.style(f'{len(module.sources)} source(s)', dim=True)}  deps: {deps}"
        )


@cli.command()
@click.argument("target")
@_config_option
@_external_option
def graph(target: str, source: Path, external: tuple[str, ...]):
    """Print the dependency edges reachable from TARGET."""
    try:
        planner = _load(source, external)
        dep_graph = planner.graph(target)
    except BuildPlanError as e:
        _fail(e)

    click.echo(f"{target} -> {', '.join(dep_graph.roots) or '-'}")
    for name in sorted(dep_graph.nodes):
        deps = dep_graph.dependencies_of(name)
        click.echo(f"  {name} -> {', '.join(deps) if deps else '-'}")


@cli.command()
@click.option("--port", "-p", default=8430, help="Port number")
@click.option("--host", default="127.0.0.1", help="Host address")
def serve(port: int, host: str):
    """Start the plan web API."""
    try:
        import uvicorn
    except ImportError:
        raise click.ClickException(
            "uvicorn is required for the web API. "
            "Install with: pip install 'buildplan[web]'"
        )

    from buildplan.web import create_app

    click.echo(f"Starting buildplan API at http://{host}:{port}")
    uvicorn.run(create_app(), host=host, port=port, log_level="info")


if __name__ == "__main__":
    cli()
