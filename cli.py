import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.syntax import Syntax

from clairconfig.config import Config, dump_config, load_config, require_datasource
from clairconfig.errors import ConfigError
from clairconfig.pagination import generate_key

app = typer.Typer(help="Inspect and validate Clair configuration files.")
console = Console()
err_console = Console(stderr=True)

ConfigOption = typer.Option(
    None, "--config", "-c", envvar="CLAIR_CONFIG",
    help="Path to the configuration file. Defaults are used when omitted.",
)


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging.")):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
    )


def _load(config: Optional[Path]) -> Config:
    try:
        return load_config(str(config) if config else None)
    except ConfigError as exc:
        err_console.print(f"[bold red]✘ {escape(str(exc))}")
        raise typer.Exit(code=1)


@app.command()
def show(
    config: Optional[Path] = ConfigOption,
    reveal: bool = typer.Option(False, help="Print the pagination key instead of masking it."),
):
    """Print the effective configuration as YAML."""
    cfg = _load(config)
    if not reveal and cfg.api.pagination_key:
        cfg = cfg.model_copy(update={"api": cfg.api.model_copy(update={"pagination_key": "********"})})
    console.print(Syntax(dump_config(cfg), "yaml"))


@app.command()
def check(
    config: Optional[Path] = ConfigOption,
    require_source: bool = typer.Option(
        False, "--require-datasource", help="Fail when database.options.source is empty."
    ),
):
    """Load the configuration and report whether it is usable."""
    cfg = _load(config)
    if require_source:
        try:
            require_datasource(cfg)
        except ConfigError as exc:
            err_console.print(f"[bold red]✘ {escape(str(exc))}")
            raise typer.Exit(code=1)
    console.print(f"[green]✔ Configuration OK[/] (database: {cfg.database.type}, api port: {cfg.api.port})")


@app.command()
def genkey():
    """Generate a pagination key suitable for api.paginationkey."""
    try:
        key = generate_key()
    except ConfigError as exc:
        err_console.print(f"[bold red]✘ {escape(str(exc))}")
        raise typer.Exit(code=1)
    typer.echo(key)


if __name__ == "__main__":
    app()
