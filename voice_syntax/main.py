"""
Command-line entry point for voice-syntax.

Feeds dictated transcripts through the correction pipeline. Text given
as arguments is one utterance; otherwise utterances are read line by line
from stdin, so a mode switched on one line applies to the next.
"""

import asyncio
import logging
import sys
from dataclasses import replace
from typing import List, Optional

import click
from rich.console import Console
from rich.logging import RichHandler

from . import __version__
from .config import LLM_PROVIDERS, LLMSettings, PipelineConfig
from .correction.llm import LLMCorrector, create_corrector
from .correction.pipeline import CorrectionPipeline
from .dev_apps import CorrectionContext, DevAppRegistry
from .modes.registry import Mode
from .modes.state import ModeState
from .transcription import TranscriptionResult
from .ui.terminal import TerminalUI

logger = logging.getLogger(__name__)


class DictationSession:
    """
    Runs utterances through one pipeline, keeping mode state between them.
    """

    def __init__(
        self,
        pipeline: CorrectionPipeline,
        config: PipelineConfig,
        context: CorrectionContext,
        ui: Optional[TerminalUI] = None,
    ):
        """
        Initialize the session.

        Args:
            pipeline: Correction pipeline
            config: Correction switches
            context: Target application context
            ui: Rich renderer. Plain text is echoed when None.
        """
        self.pipeline = pipeline
        self.config = config
        self.context = context
        self.ui = ui

    async def process_text(self, text: str) -> TranscriptionResult:
        """Correct one utterance and print it."""
        previous = self.pipeline.mode
        result = await self.pipeline.process(TranscriptionResult(text=text), self.context, self.config)
        current = self.pipeline.mode

        if self.ui:
            if current != previous:
                self.ui.show_mode_change(previous, current)
            self.ui.show_result(result, current)
        elif result.text or not result.was_corrected:
            click.echo(result.text)

        return result

    async def run(self, utterances: Optional[List[str]] = None) -> None:
        """
        Process the given utterances, or stdin lines until EOF.
        """
        if utterances is not None:
            for text in utterances:
                await self.process_text(text)
            return

        stream = click.get_text_stream('stdin')
        loop = asyncio.get_running_loop()
        while True:
            # Run blocking readline in a thread
            line = await loop.run_in_executor(None, stream.readline)
            if not line:
                break
            if line.strip():
                await self.process_text(line.rstrip("\n"))


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=verbose)],
    )


def build_llm_corrector(
    provider: Optional[str],
    model: Optional[str],
    base_url: Optional[str],
    timeout: Optional[float],
) -> LLMCorrector:
    """Create an LLM adapter from the environment with CLI overrides."""
    settings = LLMSettings.from_env(provider=provider)

    overrides = {}
    if model:
        overrides['model'] = model
    if base_url:
        overrides['base_url'] = base_url
    if timeout is not None:
        overrides['timeout'] = timeout
    return create_corrector(replace(settings, **overrides))


@click.command()
@click.version_option(version=__version__)
@click.argument('text', nargs=-1)
@click.option(
    '--mode',
    default=Mode.NONE.value,
    help='Mode to start in',
    type=click.Choice([mode.value for mode in Mode])
)
@click.option('--llm/--no-llm', default=None, help='Enable LLM correction (default: VOICE_SYNTAX_LLM_CORRECTION)')
@click.option('--always-llm', is_flag=True, default=False, help='Call the LLM even when the heuristic says no')
@click.option('--provider', type=click.Choice(LLM_PROVIDERS), default=None, help='LLM provider')
@click.option('--model', default=None, help='LLM model name')
@click.option('--base-url', default=None, help='OpenAI-compatible server URL')
@click.option('--timeout', type=float, default=None, help='LLM timeout in seconds')
@click.option('--app', 'bundle_id', default=None, help='Bundle id of the target application')
@click.option('--dev-app/--no-dev-app', default=True, help='Treat the target as a developer app (ignored with --app)')
@click.option('--no-dev-correction', is_flag=True, default=False, help='Disable all corrections')
@click.option('--plain', is_flag=True, default=False, help='Print bare text without rich formatting')
@click.option('--stats', is_flag=True, default=False, help='Show statistics at the end')
@click.option('--verbose', '-v', is_flag=True, default=False, help='Debug logging')
def main(
    text: tuple,
    mode: str,
    llm: Optional[bool],
    always_llm: bool,
    provider: Optional[str],
    model: Optional[str],
    base_url: Optional[str],
    timeout: Optional[float],
    bundle_id: Optional[str],
    dev_app: bool,
    no_dev_correction: bool,
    plain: bool,
    stats: bool,
    verbose: bool,
) -> None:
    """
    voice-syntax - turn dictated speech into Markdown and code.

    Corrects TEXT, or each line of stdin when no TEXT is given. Start a line
    with a mode trigger ("python", "markdown", "bash", ...) to switch modes,
    or "mode off" to go back to plain text.
    """
    _setup_logging(verbose)
    ui = None

    try:
        config = PipelineConfig.from_env()
        overrides = {}
        if llm is not None:
            overrides['llm_correction_enabled'] = llm
        if always_llm:
            overrides['llm_always_apply'] = True
        if no_dev_correction:
            overrides['dev_correction_enabled'] = False
        config = replace(config, **overrides)

        if bundle_id:
            context = CorrectionContext.for_app(bundle_id, DevAppRegistry())
        else:
            context = CorrectionContext(is_dev_app=dev_app)

        llm_corrector = None
        if config.llm_correction_enabled:
            llm_corrector = build_llm_corrector(provider, model, base_url, timeout)
            if not llm_corrector.available():
                logger.warning(f"LLM provider '{llm_corrector.name}' is not available, using rule-based correction")

        pipeline = CorrectionPipeline(
            mode_state=ModeState(Mode(mode)),
            llm_corrector=llm_corrector,
        )
        ui = None if plain else TerminalUI()
        session = DictationSession(pipeline, config, context, ui)

        if ui and not text:
            ui.show_welcome(pipeline.mode)

        asyncio.run(session.run([" ".join(text)] if text else None))

        if stats:
            llm_stats = llm_corrector.get_usage_stats() if llm_corrector else None
            (ui or TerminalUI()).show_stats(pipeline.get_performance_metrics(), llm_stats)

    except KeyboardInterrupt:
        click.echo("\nInterrupted by user.")
        sys.exit(0)
    except Exception as e:
        if ui:
            ui.show_error(e)
        else:
            click.echo(f"Error: {e}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
