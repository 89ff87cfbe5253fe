"""
Foundation Chat CLI: terminal chat, readiness probe and desktop launcher.

Registered as `foundation-chat` console script via pyproject.toml.
"""

import asyncio
import importlib.util
import sys

import click

from .config import ChatSettings, configure_logging
from .controller import ChatController
from .exceptions import AppleFMSetupError
from .protocols import create_model, create_session
from .store import ChangeKind, ConversationStore, StoreChange

QUIT_COMMANDS = {"/quit", "/exit"}


def _build_controller(settings: ChatSettings) -> ChatController:
    return ChatController(
        ConversationStore(),
        model_factory=create_model,
        session_factory=create_session,
        instructions=settings.instructions,
    )


def _echo_change(change: StoreChange) -> None:
    """Print store changes the terminal user needs to see."""
    if change.kind is ChangeKind.MESSAGES and change.message is not None:
        message = change.message
        color = "cyan" if message.is_user else "green"
        click.secho(f"{message.speaker}: ", fg=color, bold=True, nl=False)
        click.echo(message.content)
    elif change.kind is ChangeKind.STATUS:
        click.secho(f"[{change.value}]", dim=True)


def _fail_missing_dependencies(
    *, command_name: str, missing: list[str], install_steps: list[str]
) -> None:
    """Exit with actionable dependency guidance."""
    if not missing:
        return
    click.secho(
        f"{command_name} requires optional dependencies that are missing:",
        fg="red",
        err=True,
        bold=True,
    )
    for module in missing:
        click.echo(f"  - {module}", err=True)
    click.echo("", err=True)
    click.secho("Install with:", fg="cyan", err=True)
    for step in install_steps:
        click.echo(f"  {step}", err=True)
    raise SystemExit(2)


async def _read_line() -> str | None:
    loop = asyncio.get_running_loop()
    line = await loop.run_in_executor(None, sys.stdin.readline)
    if not line:
        return None
    return line.rstrip("\n").rstrip("\r")


async def _chat_loop(controller: ChatController) -> int:
    store = controller.store
    unsubscribe = store.subscribe(_echo_change)
    try:
        await controller.initialize()
        if not controller.is_ready:
            click.secho("No model session available; nothing can be sent.", fg="yellow", err=True)
            return 1

        interactive = sys.stdin.isatty()
        if interactive:
            click.secho("Type a message and press Enter. /quit to leave.", dim=True)
        while True:
            if interactive:
                click.echo("> ", nl=False)
            line = await _read_line()
            if line is None or line.strip() in QUIT_COMMANDS:
                return 0
            store.set_draft(line)
            await controller.send_message()
    finally:
        unsubscribe()


# ── Main group ────────────────────────────────────────────────────────────────


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="foundation-chat")
@click.option(
    "--log-level",
    default=None,
    help="Logging level (debug, info, warning, error). Overrides FOUNDATION_CHAT_LOG_LEVEL.",
)
@click.option(
    "--instructions",
    default=None,
    help="System instructions for the model session. Overrides FOUNDATION_CHAT_INSTRUCTIONS.",
)
@click.pass_context
def cli(ctx: click.Context, log_level: str | None, instructions: str | None) -> None:
    """Foundation Chat: talk to the on-device Apple Foundation Model."""
    settings = ChatSettings.from_env().merged(instructions=instructions, log_level=log_level)
    configure_logging(settings.log_level)
    ctx.obj = settings


# ── Readiness ─────────────────────────────────────────────────────────────────


@cli.command()
@click.pass_obj
def status(settings: ChatSettings) -> None:
    """Check whether the on-device model can be used and print its status."""
    controller = _build_controller(settings)
    asyncio.run(controller.initialize())
    ready = controller.is_ready
    click.secho(controller.store.status, fg="green" if ready else "yellow")
    raise SystemExit(0 if ready else 1)


# ── Terminal chat ─────────────────────────────────────────────────────────────


@cli.command()
@click.pass_obj
def chat(settings: ChatSettings) -> None:
    """Chat with the model from the terminal.

    \b
    Examples:
        foundation-chat chat
        echo "Hello" | foundation-chat chat
        foundation-chat --instructions "Answer briefly." chat
    """
    controller = _build_controller(settings)
    rc = asyncio.run(_chat_loop(controller))
    raise SystemExit(rc)


# ── Desktop view ──────────────────────────────────────────────────────────────


@cli.command()
@click.pass_obj
def gui(settings: ChatSettings) -> None:
    """Open the single-window Toga chat view."""
    missing = [name for name in ("toga",) if importlib.util.find_spec(name) is None]
    _fail_missing_dependencies(
        command_name="foundation-chat gui",
        missing=missing,
        install_steps=['pip install "foundation-chat[gui]"'],
    )
    from .app import main

    main(settings).main_loop()


# ── Entry point ───────────────────────────────────────────────────────────────


def cli_entry() -> None:
    """Entry point for the console_scripts."""
    try:
        cli()
    except AppleFMSetupError as exc:
        click.secho(str(exc), fg="red", err=True)
        raise SystemExit(2) from exc


if __name__ == "__main__":
    cli_entry()
