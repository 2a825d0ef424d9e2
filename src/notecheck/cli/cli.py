"""CLI entrypoint: Typer app definition and command registration"""

import typer

from notecheck.cli.commands import check_cmd, list_cmd, main_callback, show_cmd


app = typer.Typer(name="notecheck", no_args_is_help=True, help="Session-notes corpus validator")

app.callback()(main_callback)
app.command(name="check")(check_cmd)
app.command(name="list")(list_cmd)
app.command(name="show")(show_cmd)
