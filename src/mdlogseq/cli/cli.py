"""CLI entrypoint: Typer app definition and command registration"""

import typer

from mdlogseq.cli.commands import check_cmd, insert_cmd, main_callback, outline_cmd, parse_cmd


app = typer.Typer(name="mdlogseq", no_args_is_help=True, help="Markdown to Logseq block outlines")

app.callback()(main_callback)
app.command(name="parse")(parse_cmd)
app.command(name="outline")(outline_cmd)
app.command(name="insert")(insert_cmd)
app.command(name="check")(check_cmd)
