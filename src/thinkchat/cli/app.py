"""Main CLI application using Typer."""
import asyncio

import typer
from dotenv import load_dotenv
from pydantic import ValidationError
from rich.console import Console
from rich.live import Live

from ..config import ModelConfig
from ..errors import ChatError
from ..session import ChatSession, SubmitMode
from .providers import build_session, get_config, get_store, setup_logging
from .rendering import LiveRenderer, render_config, render_message, render_record

# Load environment variables
load_dotenv()

app = typer.Typer(
    name="thinkchat",
    help="Streaming chat client for locally hosted language models",
    no_args_is_help=True,
    add_completion=True,
)
config_app = typer.Typer(help="Show or change model settings", no_args_is_help=True)
app.add_typer(config_app, name="config")

console = Console()

CHAT_HELP = (
    "[dim]Commands: /mode plain|stream|extract, /system <prompt>, "
    "/system (reset), /clear, /quit[/dim]"
)


@app.callback()
def main(
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show debug logging"
    )
):
    """Thinkchat command line."""
    setup_logging(verbose)


async def _submit_and_render(
    session: ChatSession,
    renderer: LiveRenderer,
    text: str,
    mode: SubmitMode,
    system_prompt: str | None,
) -> bool:
    """Run one submission with a live partial-output display.

    Returns:
        False if the request failed
    """
    try:
        with Live(console=console, refresh_per_second=12, transient=True) as live:
            renderer.live = live
            await session.submit(text, system_prompt=system_prompt, mode=mode)
    except ChatError:
        console.print(f"[red]Error: {session.error}[/red]")
        return False
    finally:
        renderer.live = None

    console.print(render_message(session.messages[-1], renderer.show_thinking))
    if mode is SubmitMode.EXTRACT and session.extracted_record is not None:
        console.print(render_record(session.extracted_record))
    return True


@app.command()
def ask(
    text: str = typer.Argument(..., help="Message to send"),
    mode: SubmitMode = typer.Option(
        SubmitMode.STREAM,
        "--mode",
        "-m",
        help="Answer mode: plain, stream, or extract"
    ),
    system: str | None = typer.Option(
        None,
        "--system",
        "-s",
        help="System prompt override"
    )
):
    """Send a single message and print the answer."""
    async def _ask() -> bool:
        config = get_config()
        renderer = LiveRenderer(show_thinking=config.show_thinking)
        session = build_session(config, listener=renderer)
        try:
            return await _submit_and_render(session, renderer, text, mode, system)
        finally:
            await session.client.close()

    if not asyncio.run(_ask()):
        raise typer.Exit(code=1)


@app.command()
def chat(
    mode: SubmitMode = typer.Option(
        SubmitMode.STREAM,
        "--mode",
        "-m",
        help="Initial answer mode: plain, stream, or extract"
    ),
    system: str | None = typer.Option(
        None,
        "--system",
        "-s",
        help="System prompt override"
    )
):
    """Start an interactive chat session."""
    async def _chat() -> None:
        config = get_config()
        renderer = LiveRenderer(show_thinking=config.show_thinking)
        session = build_session(config, listener=renderer)
        current_mode = mode
        system_prompt = system

        console.print(f"[bold]thinkchat[/bold] [dim]{config.model} @ {config.endpoint}[/dim]")
        console.print(CHAT_HELP)

        try:
            while True:
                try:
                    line = console.input(f"[bold cyan]{current_mode.value}>[/] ").strip()
                except (EOFError, KeyboardInterrupt):
                    console.print()
                    break

                if not line:
                    continue
                if line in ("/quit", "/exit"):
                    break
                if line == "/clear":
                    session.clear()
                    console.print("[dim]Chat cleared.[/dim]")
                    continue
                if line.startswith("/mode"):
                    value = line.removeprefix("/mode").strip()
                    try:
                        current_mode = SubmitMode(value)
                    except ValueError:
                        console.print("[yellow]Usage: /mode plain|stream|extract[/yellow]")
                    continue
                if line.startswith("/system"):
                    system_prompt = line.removeprefix("/system").strip() or None
                    console.print(f"[dim]System prompt: {system_prompt or '(default)'}[/dim]")
                    continue
                if line.startswith("/"):
                    console.print(CHAT_HELP)
                    continue

                await _submit_and_render(session, renderer, line, current_mode, system_prompt)
                console.print(f"[dim]{session.message_count} messages[/dim]")
        finally:
            await session.client.close()

    asyncio.run(_chat())


@app.command()
def models():
    """List models available on the configured endpoint."""
    async def _models() -> None:
        session = build_session()
        config = session.client.config
        try:
            names = await session.client.provider().list_models()
        except Exception as e:
            console.print(f"[red]x[/red] {config.endpoint}: unreachable ({e})")
            raise typer.Exit(code=1)
        finally:
            await session.client.close()

        console.print(f"[green]+[/green] {config.endpoint}: {len(names)} models")
        for name in names:
            marker = "[green]*[/green]" if name == config.model else " "
            console.print(f" {marker} {name}")

    asyncio.run(_models())


@config_app.command("show")
def config_show():
    """Show the active model settings."""
    store = get_store()
    console.print(render_config(store.load(), store.has_stored()))
    console.print(f"[dim]Settings file: {store.path}[/dim]")


@config_app.command("set")
def config_set(
    endpoint: str | None = typer.Option(None, "--endpoint", "-e", help="Model server URL"),
    model: str | None = typer.Option(None, "--model", "-m", help="Model identifier"),
    temperature: float | None = typer.Option(None, "--temperature", "-t", help="Sampling temperature (0-2)"),
    max_tokens: int | None = typer.Option(None, "--max-tokens", help="Maximum tokens to generate"),
    thinking: bool | None = typer.Option(None, "--thinking/--no-thinking", help="Show the reasoning trace"),
):
    """Save new model settings."""
    store = get_store()
    current = store.load()
    changes = {
        "endpoint": endpoint,
        "model": model,
        "temperature": temperature,
        "max_tokens": max_tokens,
        "show_thinking": thinking,
    }
    merged = current.model_dump() | {k: v for k, v in changes.items() if v is not None}

    try:
        config = ModelConfig.model_validate(merged)
    except ValidationError as e:
        for err in e.errors():
            field = ".".join(str(part) for part in err["loc"])
            console.print(f"[red]Invalid {field}: {err['msg']}[/red]")
        raise typer.Exit(code=1)

    if config == current and store.has_stored():
        console.print("[dim]No changes.[/dim]")
        return

    store.save(config)
    console.print("[green]Settings saved.[/green]")
    console.print(render_config(config, stored=True))


@config_app.command("reset")
def config_reset():
    """Forget saved settings and use the defaults."""
    store = get_store()
    if not store.has_stored():
        console.print("[dim]Already using defaults.[/dim]")
        return
    store.reset()
    console.print("[green]Settings reset to defaults.[/green]")


if __name__ == "__main__":
    app()
