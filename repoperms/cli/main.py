"""repoperms command-line tool."""

import sys
from typing import Optional

import typer
from rich.console import Console

from repoperms.cli import __version__
from repoperms.cli.utils.context import CLIContext
from repoperms.cli.utils.output import OutputFormat, OutputFormatter
from repoperms.core.config import get_settings
from repoperms.core.errors import PermsError
from repoperms.core.permissions import Assignment
from repoperms.infrastructure.logging import clear_context, get_logger, setup_logging

app = typer.Typer(
    name="repoperms",
    help="Manage role assignments on repositories you created",
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
    pretty_exceptions_enable=False,
)

console = Console()
logger = get_logger(__name__)


def version_callback(value: bool):
    """Display version and exit."""
    if value:
        console.print(f"repoperms v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        "-d",
        help="Enable debug logging",
    ),
    output_format: str = typer.Option(
        "table",
        "--output",
        "-o",
        help="Output format: table, json, yaml",
    ),
    user: Optional[str] = typer.Option(
        None,
        "--user",
        "-u",
        envvar="REPOPERMS_USER",
        help="Acting user",
    ),
):
    """
    Manage role assignments on user-created repositories.
    """
    settings = get_settings()
    if debug:
        settings.log_level = "DEBUG"
    setup_logging(settings)
    ctx.call_on_close(clear_context)

    ctx.obj = CLIContext(
        debug=debug,
        settings=settings,
        formatter=OutputFormatter(output_format),
        console=console,
        acting_user=user,
    )


@app.command("list")
def list_command(
    ctx: typer.Context,
    repo: str = typer.Argument(..., help="Repository id"),
):
    """
    Show the role assignments of a repository.

    Example:
        repoperms list users/alice/proj
    """
    cli_ctx: CLIContext = ctx.obj

    try:
        content = cli_ctx.get_controller().list_assignments(repo, cli_ctx.acting_user)
    except PermsError as e:
        _fail(cli_ctx, e)

    if cli_ctx.formatter.format == OutputFormat.TABLE:
        cli_ctx.formatter.print_raw(content)
        return

    assignments = [
        {"role": a.role, "user": a.user}
        for a in map(Assignment.from_line, content.splitlines())
        if a is not None
    ]
    cli_ctx.formatter.print_list(assignments)


@app.command("roles")
def roles_command(
    ctx: typer.Context,
    repo: str = typer.Argument(..., help="Repository id"),
):
    """
    Show the roles that can be assigned on a repository, with their rules.

    Example:
        repoperms roles users/alice/proj
    """
    cli_ctx: CLIContext = ctx.obj

    try:
        rules = cli_ctx.get_controller().list_roles(repo, cli_ctx.acting_user)
    except PermsError as e:
        _fail(cli_ctx, e)

    cli_ctx.formatter.print_list(
        [rule.to_dict() for rule in rules],
        columns=["permission", "ref", "role"],
        title=f"Roles for {repo}",
    )


@app.command("set")
def set_command(
    ctx: typer.Context,
    repo: str = typer.Argument(..., help="Repository id"),
    operation: Optional[str] = typer.Argument(None, help="'+' to add, '-' to remove"),
    role: Optional[str] = typer.Argument(None, help="Role name"),
    user: Optional[str] = typer.Argument(None, help="User to assign"),
):
    """
    Add or remove one assignment, or replace all of them from stdin.

    Example:
        repoperms set users/alice/proj + READERS bob
        repoperms set users/alice/proj - READERS bob
        repoperms set users/alice/proj < assignments.txt
    """
    cli_ctx: CLIContext = ctx.obj

    try:
        result = cli_ctx.get_controller().mutate(
            repo,
            cli_ctx.acting_user,
            operation=operation,
            role=role,
            user=user,
            lines=sys.stdin,
        )
    except PermsError as e:
        _fail(cli_ctx, e)
    except KeyboardInterrupt:
        logger.warning("batch_interrupted", repository=repo)
        cli_ctx.formatter.print_error("interrupted, no changes written")
        raise typer.Exit(130)

    if result.outcome.is_notice:
        cli_ctx.formatter.print_warning(result.message)
    else:
        cli_ctx.formatter.print_success(result.message)


def _fail(cli_ctx: CLIContext, error: PermsError):
    if cli_ctx.debug and error.details:
        logger.debug("command_failed", code=error.code, details=error.details)
    cli_ctx.formatter.print_error(error.message)
    raise typer.Exit(error.exit_code)


if __name__ == "__main__":
    app()
