"""CLI entry point for bootstrap-token.

Invoked as::

    bootstrap-token [OPTIONS] COMMAND [ARGS]...

or, during development::

    python -m bootstrap_token.cli.main

Commands
--------
token create     Create a bootstrap token in the store
token list       List bootstrap tokens in the store
token delete     Delete bootstrap tokens by ID or full token
token generate   Print a random token without storing it
"""
from __future__ import annotations

import datetime
import logging
import sys
from dataclasses import dataclass
from pathlib import Path

import click
import pydantic
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from bootstrap_token import __version__
from bootstrap_token.config import TokenServiceConfig
from bootstrap_token.durations import parse_duration
from bootstrap_token.errors import BootstrapTokenError, DeleteTokensError, InvalidFormatError
from bootstrap_token.service import HUMAN_COLUMNS, HUMAN_HEADER, TokenService
from bootstrap_token.store import DryRunTokenStore, FileTokenStore, TokenStoreClient
from bootstrap_token.tokens.token_string import TOKEN_ID_PATTERN, TOKEN_PATTERN, TokenString

console = Console()
err_console = Console(stderr=True)

DEFAULT_STORE_FILE = Path.home() / ".bootstrap-token" / "tokens.json"


@dataclass
class _TokenContext:
    store: TokenStoreClient
    config: TokenServiceConfig

    def service(self) -> TokenService:
        return TokenService(self.store, self.config)


# ------------------------------------------------------------------
# Root group
# ------------------------------------------------------------------


@click.group()
@click.version_option(version=__version__, prog_name="bootstrap-token")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Logging verbosity.",
)
def cli(log_level: str) -> None:
    """Manage cluster bootstrap tokens"""
    logging.basicConfig(level=getattr(logging, log_level.upper()))


@cli.command(name="version")
def version_command() -> None:
    """Show detailed version information."""
    console.print(f"[bold]bootstrap-token[/bold] v{__version__}", soft_wrap=True)


# ------------------------------------------------------------------
# token command group
# ------------------------------------------------------------------


@cli.group(name="token")
@click.option(
    "--store-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=DEFAULT_STORE_FILE,
    envvar="BOOTSTRAP_TOKEN_STORE",
    show_default=True,
    help="JSON file holding the stored token records.",
)
@click.option(
    "--config",
    "config_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="JSON configuration file (namespace and token defaults).",
)
@click.option(
    "--dry-run",
    is_flag=True,
    default=False,
    help="Report the changes that would be made without making them.",
)
@click.pass_context
def token_group(
    ctx: click.Context,
    store_file: Path,
    config_file: Path | None,
    dry_run: bool,
) -> None:
    """Manage bootstrap tokens.

    A bootstrap token has the form "[a-z0-9]{6}.[a-z0-9]{16}". The first
    part is the public token ID; the second is the token secret and must be
    kept private. Each token is stored as a secret named
    "bootstrap-token-<token-id>".
    """
    config = TokenServiceConfig()
    if config_file is not None:
        try:
            config = TokenServiceConfig.from_file(config_file)
        except (OSError, pydantic.ValidationError) as exc:
            err_console.print(
                f"[red]Error:[/red] could not load config: {escape(str(exc))}", soft_wrap=True
            )
            sys.exit(1)

    store: TokenStoreClient = FileTokenStore(store_file)
    if dry_run:
        store = DryRunTokenStore(store)
    ctx.obj = _TokenContext(store=store, config=config)


# ------------------------------------------------------------------
# token create
# ------------------------------------------------------------------


def _parse_ttl(
    ctx: click.Context, param: click.Parameter, value: str | None
) -> datetime.timedelta | None:
    if value is None:
        return None
    try:
        return parse_duration(value)
    except InvalidFormatError as exc:
        raise click.BadParameter(str(exc)) from exc


def _parse_list(
    ctx: click.Context, param: click.Parameter, value: str | None
) -> list[str] | None:
    if value is None:
        return None
    return [item.strip() for item in value.split(",") if item.strip()]


@token_group.command(name="create")
@click.argument("token", required=False)
@click.option(
    "--ttl",
    callback=_parse_ttl,
    default=None,
    help="Token lifetime, e.g. '1h30m'. '0' means the token never expires. [default: 24h]",
)
@click.option(
    "--usages",
    callback=_parse_list,
    default=None,
    help="Comma-separated usages. [default: signing,authentication]",
)
@click.option(
    "--groups",
    callback=_parse_list,
    default=None,
    help="Comma-separated extra groups the token authenticates as.",
)
@click.option("--description", default=None, help="Human-friendly description of the token.")
@click.option(
    "--print-join-command",
    is_flag=True,
    default=False,
    help="Print the full join command instead of only the token.",
)
@click.option(
    "--api-server",
    default=None,
    help="Control-plane endpoint (host:port) for the join command.",
)
@click.option(
    "--ca-cert",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="PEM cluster CA certificate to pin in the join command.",
)
@click.pass_obj
def create_command(
    obj: _TokenContext,
    token: str | None,
    ttl: datetime.timedelta | None,
    usages: list[str] | None,
    groups: list[str] | None,
    description: str | None,
    print_join_command: bool,
    api_server: str | None,
    ca_cert: Path | None,
) -> None:
    """Create a bootstrap token on the server.

    TOKEN is the token to write. If omitted, a random token is generated.
    """
    if print_join_command and not api_server:
        raise click.UsageError("--print-join-command requires --api-server")

    try:
        spec = obj.config.defaults.build_token(
            token=token,
            ttl=ttl,
            usages=usages,
            groups=groups,
            description=description,
        )
        created = obj.service().create_token(spec)
    except BootstrapTokenError as exc:
        err_console.print(f"[red]Error:[/red] {escape(str(exc))}", soft_wrap=True)
        sys.exit(1)

    assert created.token is not None
    if print_join_command:
        from bootstrap_token.join import join_command

        ca_pem = ca_cert.read_bytes() if ca_cert is not None else None
        try:
            line = join_command(api_server, created.token, ca_pem)
        except ValueError as exc:
            err_console.print(
                f"[red]Error:[/red] failed to get join command: {escape(str(exc))}",
                soft_wrap=True,
            )
            sys.exit(1)
        console.print(escape(line), soft_wrap=True)
    else:
        console.print(str(created.token), soft_wrap=True)


# ------------------------------------------------------------------
# token generate
# ------------------------------------------------------------------


@token_group.command(name="generate")
def generate_command() -> None:
    """Generate and print a bootstrap token, but do not store it."""
    console.print(str(TokenString.generate()), soft_wrap=True)


# ------------------------------------------------------------------
# token list
# ------------------------------------------------------------------


@token_group.command(name="list")
@click.option(
    "--output",
    "-o",
    type=click.Choice(["table", "text"]),
    default="table",
    show_default=True,
    help="Render as a table or as tab-separated text.",
)
@click.pass_obj
def list_command(obj: _TokenContext, output: str) -> None:
    """List bootstrap tokens on the server."""
    service = obj.service()
    try:
        results = service.list_tokens()
    except BootstrapTokenError as exc:
        err_console.print(f"[red]Error:[/red] {escape(str(exc))}", soft_wrap=True)
        sys.exit(1)

    rows: list[str] = []
    for result in results:
        if result.token is None:
            err_console.print(
                f"[yellow]Warning:[/yellow] {escape(str(result.error))}", soft_wrap=True
            )
            continue
        rows.append(service.format_human(result.token))

    if output == "text":
        click.echo(HUMAN_HEADER)
        for row in rows:
            click.echo(row)
        return

    table = Table(show_header=True, box=None)
    for column in HUMAN_COLUMNS:
        table.add_column(column)
    for row in rows:
        table.add_row(*(escape(cell) for cell in row.split("\t")))
    console.print(table)


# ------------------------------------------------------------------
# token delete
# ------------------------------------------------------------------


@token_group.command(name="delete")
@click.argument("tokens", nargs=-1)
@click.pass_obj
def delete_command(obj: _TokenContext, tokens: tuple[str, ...]) -> None:
    """Delete bootstrap tokens on the server.

    Each TOKENS value is either a full token of the form
    "[a-z0-9]{6}.[a-z0-9]{16}" or a token ID of the form "[a-z0-9]{6}".
    """
    if not tokens:
        raise click.UsageError(
            f"'token delete' is missing a token of form {TOKEN_PATTERN!r} or {TOKEN_ID_PATTERN!r}"
        )

    try:
        results = obj.service().delete_tokens(list(tokens))
        failed = False
    except DeleteTokensError as exc:
        results = exc.results
        failed = True

    for result in results:
        if result.ok:
            console.print(
                f"bootstrap token {escape(repr(result.token_id))} deleted", soft_wrap=True
            )
        else:
            err_console.print(f"[red]Error:[/red] {escape(str(result.error))}", soft_wrap=True)

    if failed:
        sys.exit(1)


if __name__ == "__main__":
    cli()
