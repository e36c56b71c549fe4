"""CLI entry point for yuml2svg."""

import asyncio
import sys

import aiofiles
import click

from yuml2svg.errors import Yuml2SvgError
from yuml2svg.log import configure_logging
from yuml2svg.pipeline import render
from yuml2svg.types import DiagramType, Direction


async def _render_file(path: str, options: dict) -> str:
    async with aiofiles.open(path, "rb") as f:
        return await render(f, options)


@click.command()
@click.argument("input", required=False, type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--type", "-t", "diagram_type", type=click.Choice(DiagramType.names()), default=None, help="Default diagram type"
)
@click.option(
    "--dir", "-d", "direction", type=click.Choice([d.value for d in Direction]), default=None, help="Default direction"
)
@click.option("--dark", is_flag=True, help="Use the dark theme")
@click.option("--output", "-o", "output", type=str, default=None, help="Write output to this file instead of stdout")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def main(
    input: str | None,
    diagram_type: str | None,
    direction: str | None,
    dark: bool,
    output: str | None,
    verbose: bool,
) -> None:
    """yUML diagram text to SVG."""
    configure_logging(verbose)

    options: dict = {"isDark": dark}
    if diagram_type:
        options["type"] = diagram_type
    if direction:
        options["dir"] = direction

    try:
        if input:
            rendered = asyncio.run(_render_file(input, options))
        else:
            rendered = asyncio.run(render(sys.stdin.read(), options))
    except OSError as e:
        click.echo(f"error: cannot read '{input}': {e}", err=True)
        sys.exit(1)
    except UnicodeDecodeError as e:
        click.echo(f"error: input is not valid UTF-8: {e}", err=True)
        sys.exit(1)
    except Yuml2SvgError as e:
        click.echo(f"error: {e}", err=True)
        sys.exit(1)

    if output:
        try:
            with open(output, "w") as f:
                f.write(rendered)
        except OSError as e:
            click.echo(f"error: cannot write '{output}': {e}", err=True)
            sys.exit(1)
    else:
        click.echo(rendered)


if __name__ == "__main__":
    main()
