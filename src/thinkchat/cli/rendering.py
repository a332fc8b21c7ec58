"""Rich renderables for sessions, messages and extracted records."""

from rich.console import Group, RenderableType
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..config import ModelConfig
from ..extraction import ExtractedRecord
from ..session import ChatSession, Message


def render_thinking(thinking: str) -> Panel:
    return Panel(Text(thinking, style="dim italic"), title="Thinking", border_style="dim")


def render_streaming(session: ChatSession, show_thinking: bool) -> RenderableType:
    """Partial output of the in-flight request."""
    parts: list[RenderableType] = []
    if show_thinking and session.streaming_thinking:
        parts.append(render_thinking(session.streaming_thinking))
    if session.streaming_content:
        parts.append(Text(session.streaming_content))
    if not parts:
        parts.append(Text("...", style="dim"))
    return Group(*parts)


def render_message(message: Message, show_thinking: bool) -> RenderableType:
    """A finalized transcript message."""
    if message.role == "user":
        return Text.assemble(("You: ", "bold cyan"), message.content)

    parts: list[RenderableType] = []
    if show_thinking and message.thinking:
        parts.append(render_thinking(message.thinking))
    parts.append(Text.assemble(("Assistant: ", "bold magenta"), message.content))
    return Group(*parts)


def render_record(record: ExtractedRecord) -> Table:
    """Extracted personal details as a two-column table."""
    table = Table(show_header=False, title="Extracted user information", title_style="bold green")
    table.add_column("Field", style="bold cyan", width=12)
    table.add_column("Value")

    table.add_row("Name", record.name)
    table.add_row("Age", str(record.age))
    table.add_row("Email", record.email)
    table.add_row("Phone", record.phone)
    table.add_row("Address", f"{record.address.city} {record.address.district} {record.address.street}")
    if record.occupation:
        table.add_row("Occupation", record.occupation)
    table.add_row("Hobbies", ", ".join(record.hobbies) or "-")
    return table


def render_config(config: ModelConfig, stored: bool) -> Table:
    table = Table(show_header=False, box=None)
    table.add_column("Setting", style="bold cyan", width=15)
    table.add_column("Value")

    table.add_row("Endpoint", config.endpoint)
    table.add_row("Model", config.model)
    table.add_row("Temperature", f"{config.temperature:g}")
    table.add_row("Max tokens", str(config.max_tokens))
    table.add_row("Show thinking", "yes" if config.show_thinking else "no")
    table.add_row("Source", "saved settings" if stored else "defaults")
    return table


class LiveRenderer:
    """Session listener that redraws partial output inside a Live display."""

    def __init__(self, show_thinking: bool):
        self.show_thinking = show_thinking
        self.live: Live | None = None

    def __call__(self, session: ChatSession) -> None:
        if self.live is not None and session.is_busy:
            self.live.update(render_streaming(session, self.show_thinking))
