"""CLI entrypoint: Typer app definition and command registration"""

import typer

from mdsite.cli.commands import build_cmd, list_cmd, nav_cmd, render_cmd, show_cmd


app = typer.Typer(name="mdsite", no_args_is_help=True, help="MDX docs and blog content pipeline")

app.command(name="build")(build_cmd)
app.command(name="list")(list_cmd)
app.command(name="show")(show_cmd)
app.command(name="nav")(nav_cmd)
app.command(name="render")(render_cmd)
