"""CLI entry point — registers all subcommands."""

import typer

app = typer.Typer(
    name="stylelens",
    help="stylelens - Stylesheet dependency graph and root-cause optimizer",
    add_completion=False,
    rich_markup_mode="rich",
)


# Import subcommands to register them
from .graph import graph as _graph  # noqa: F401, E402
from .optimize import optimize as _optimize  # noqa: F401, E402
