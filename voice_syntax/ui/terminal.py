"""
Rich-based terminal output for the voice-syntax CLI.

Shows each corrected utterance next to what was dictated, mode switches
and pipeline statistics.
"""

from typing import Any, Dict, Optional

try:
    from rich.console import Console
    from rich.panel import Panel
    from rich.text import Text
    from rich.table import Table
    from rich import box
    RICH_AVAILABLE = True
except ImportError:
    RICH_AVAILABLE = False
    Console = None

from ..modes.registry import Mode, get_spec
from ..transcription import TranscriptionResult


class TerminalUI:
    """
    Rich terminal renderer for dictation results.

    Corrected text is printed inside a panel titled with the active mode;
    untouched text is printed as-is so the output stays copyable.
    """

    def __init__(self, console: Optional[Console] = None):
        """Initialize the terminal UI."""
        if not RICH_AVAILABLE:
            raise RuntimeError("Rich library not available. Install with: pip install rich")

        self.console = console or Console()

    def show_welcome(self, mode: Mode) -> None:
        """Print a short banner with the starting mode."""
        welcome_text = Text()
        welcome_text.append("voice-syntax", style="bold magenta")
        welcome_text.append(f"\n\nMode: {get_spec(mode).display_name}\n")
        welcome_text.append("Say \"markdown\", \"python\", \"bash\"... to switch, \"mode off\" to stop.", style="dim")

        self.console.print(Panel(
            welcome_text,
            title="Dictation",
            title_align="center",
            border_style="cyan",
            padding=(1, 2)
        ))

    def show_mode_change(self, previous: Mode, current: Mode) -> None:
        """Announce a mode switch."""
        self.console.print(
            f"🔀 Mode: [dim]{get_spec(previous).display_name}[/dim] → "
            f"[bold cyan]{get_spec(current).display_name}[/bold cyan]"
        )

    def show_result(self, result: TranscriptionResult, mode: Mode) -> None:
        """
        Display one processed utterance.

        Args:
            result: Pipeline output
            mode: Mode active after processing
        """
        if not result.was_corrected:
            self.console.print(Text(result.text))
            return

        if not result.text:
            # Mode-only utterance, the mode change line says it all
            return

        body = Text(result.text, style="white")
        if result.original_text:
            body.append(f"\n\n{result.original_text}", style="dim")

        self.console.print(Panel(
            body,
            title=get_spec(mode).display_name,
            title_align="left",
            border_style="green",
            padding=(0, 1)
        ))

    def show_stats(self, pipeline_stats: Dict[str, Any], llm_stats: Optional[Dict[str, Any]] = None) -> None:
        """Print pipeline and LLM counters as a table."""
        table = Table(
            title="Session Statistics",
            title_style="bold cyan",
            box=box.ROUNDED,
            show_header=True,
            header_style="bold white"
        )
        table.add_column("Counter", style="magenta")
        table.add_column("Value", style="yellow", justify="right")

        for key, value in pipeline_stats.items():
            table.add_row(key, f"{value:.2f}s" if key == 'total_time' else str(value))
        for key, value in (llm_stats or {}).items():
            table.add_row(f"llm {key}", str(value))

        self.console.print(table)

    def show_error(self, error: Exception) -> None:
        """
        Display error message with Rich formatting.

        Args:
            error: Exception to display
        """
        error_message = str(error)

        if "api" in error_message.lower() or "key" in error_message.lower():
            guidance = "\n\n💡 Check your API keys or --base-url."
        elif "timeout" in error_message.lower() or "timed out" in error_message.lower():
            guidance = "\n\n💡 Try a larger --timeout, the model might be slow."
        else:
            guidance = ""

        self.console.print(Panel(
            Text(f"❌ {error_message}{guidance}", style="red"),
            title="Error",
            title_align="center",
            border_style="red",
            padding=(1, 2)
        ))
