"""CLI entrypoint: Typer app definition and command registration"""

import typer

from postref.cli.commands import build_cmd, check_cmd, list_cmd, refs_cmd


app = typer.Typer(name="postref", no_args_is_help=True, help="Front matter post collection: index and resolve post_url links")

app.command(name="build")(build_cmd)
app.command(name="check")(check_cmd)
app.command(name="list")(list_cmd)
app.command(name="refs")(refs_cmd)
