import logging
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler

from crabapi import __version__
from crabapi.codegen.codegen import Codegen
from crabapi.codegen.emitter import CodeEmitter, FileEmitter
from crabapi.codegen.tags import TagFormat
from crabapi.config import GeneratorConfig, get_config
from crabapi.exceptions import CrabAPIError

console = Console()
err_console = Console(stderr=True)
app = typer.Typer(
    name='crabapi',
    help='Generate Rust admin client code from OpenAPI descriptions',
    no_args_is_help=True,
)

TagOption = Annotated[
    str | None,
    typer.Option('--tag', '-t', help="Only this tag group, as a module file ('none' for untagged)"),
]
NoTagOption = Annotated[
    bool, typer.Option('--no-tag', help='All groups without feature gates')
]
OutputOption = Annotated[
    str | None,
    typer.Option('--output', '-o', help='Write to this file instead of stdout'),
]


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(message)s',
        handlers=[RichHandler(console=err_console, show_time=False, show_path=False)],
        force=True,
    )


def _fail(e: Exception) -> typer.Exit:
    err_console.print(f'[red]Error:[/red] {e}', highlight=False)
    return typer.Exit(1)


def _codegen(ctx: typer.Context) -> Codegen:
    config: GeneratorConfig = ctx.obj
    return Codegen(config)


def _emitter(output: str | None) -> CodeEmitter | None:
    return FileEmitter(output) if output else None


def _print(source: str, output: str | None) -> None:
    if output is None:
        typer.echo(source, nl=False)


@app.callback()
def main(
    ctx: typer.Context,
    config: Annotated[
        str | None,
        typer.Option('--config', '-c', help='Path to configuration file (YAML or JSON)'),
    ] = None,
    source: Annotated[
        str | None,
        typer.Option('--source', '-s', help='Path or URL of the OpenAPI description'),
    ] = None,
    patch: Annotated[
        str | None,
        typer.Option('--patch', '-p', help='TOML file with type overrides'),
    ] = None,
    verbose: Annotated[
        bool, typer.Option('--verbose', '-v', help='Enable debug logging')
    ] = False,
) -> None:
    """Generate Rust admin client code from an OpenAPI description.

    Settings are read from the configuration file, crabapi.yaml, the
    [tool.crabapi] table of pyproject.toml or CRABAPI_* environment
    variables; --source and --patch take precedence.
    """
    _setup_logging(verbose)
    try:
        settings = get_config(config)
    except CrabAPIError as e:
        raise _fail(e)

    updates = {}
    if source is not None:
        updates['source'] = source
    if patch is not None:
        updates['patch_file'] = patch
    ctx.obj = settings.model_copy(update=updates)


@app.command()
def types(ctx: typer.Context, output: OutputOption = None) -> None:
    """Generate the type declarations module.

    Examples:
        crabapi --source openapi.json types
        crabapi --source openapi.json types -o src/types.rs
    """
    try:
        source = _codegen(ctx).generate_types(emitter=_emitter(output))
    except CrabAPIError as e:
        raise _fail(e)
    _print(source, output)


@app.command()
def rest(
    ctx: typer.Context,
    tag: TagOption = None,
    no_tag: NoTagOption = False,
    output: OutputOption = None,
) -> None:
    """Generate the flat client methods.

    By default every tag group is rendered with per-method feature gates.

    Examples:
        crabapi rest
        crabapi rest --tag Users -o src/rest/generated_rest/users.rs
        crabapi rest --no-tag
    """
    try:
        source = _codegen(ctx).generate_rest(tag, no_tag, emitter=_emitter(output))
    except CrabAPIError as e:
        raise _fail(e)
    _print(source, output)


@app.command()
def resource(
    ctx: typer.Context,
    tag: TagOption = None,
    no_tag: NoTagOption = False,
    output: OutputOption = None,
) -> None:
    """Generate the fluent realm methods, result holders and builders."""
    try:
        source = _codegen(ctx).generate_resource(tag, no_tag, emitter=_emitter(output))
    except CrabAPIError as e:
        raise _fail(e)
    _print(source, output)


@app.command()
def tags(
    ctx: typer.Context,
    format: Annotated[
        TagFormat, typer.Option('--format', '-f', help='Listing format')
    ] = TagFormat.features,
    output: OutputOption = None,
) -> None:
    """List the tag groups as Cargo features, module declarations or names."""
    try:
        source = _codegen(ctx).list_tags(format, emitter=_emitter(output))
    except CrabAPIError as e:
        raise _fail(e)
    _print(source, output)


@app.command()
def specs(ctx: typer.Context) -> None:
    """Pretty-print the parsed description."""
    try:
        spec = _codegen(ctx).specs()
    except CrabAPIError as e:
        raise _fail(e)
    console.print(spec)


@app.command()
def version() -> None:
    """Show the version of crabapi."""
    console.print(f'crabapi version: {__version__}')


if __name__ == '__main__':
    app()
