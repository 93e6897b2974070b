"""
Correction orchestration.

Routes a finished transcript through mode detection, the deterministic
preprocessor, rule-based or LLM correction and the postprocessor.
"""

from typing import Any, Dict, Optional, Union
import logging
import time

from ..config import PipelineConfig
from ..dev_apps import CorrectionContext
from ..modes.detector import ModeDetector
from ..modes.prompts import get_prompt
from ..modes.registry import Mode, get_spec
from ..modes.state import ModeState
from ..transcription import TranscriptionResult
from .errors import CorrectionError
from .llm import LLMCorrector, should_apply_correction
from .postprocessor import postprocess
from .preprocessor import Preprocessor
from .rules import RuleBasedCorrector

# Setup logging
logger = logging.getLogger(__name__)


class CorrectionPipeline:
    """
    Corrects dictated text for the active voice mode.

    The pipeline owns no global state: the mode lives in the ModeState it is
    given, and each call holds that state's lock for its whole duration, LLM
    call included. Correction never fails outward; LLM errors degrade to the
    rule-based corrector or to the preprocessed text.
    """

    def __init__(
        self,
        mode_state: Optional[ModeState] = None,
        detector: Optional[ModeDetector] = None,
        preprocessor: Optional[Preprocessor] = None,
        rule_corrector: Optional[RuleBasedCorrector] = None,
        llm_corrector: Optional[LLMCorrector] = None,
    ):
        """
        Initialize the pipeline.

        Args:
            mode_state: Shared mode cell. A fresh one starting in plain mode if None.
            detector: Mode trigger detector
            preprocessor: Deterministic rewriter
            rule_corrector: Fallback symbol corrector for programming modes
            llm_corrector: Optional language-model adapter
        """
        self.mode_state = mode_state or ModeState()
        self.detector = detector or ModeDetector()
        self.preprocessor = preprocessor or Preprocessor()
        self.rule_corrector = rule_corrector or RuleBasedCorrector()
        self.llm_corrector = llm_corrector
        self.performance_metrics = {
            'processed': 0,
            'corrected': 0,
            'llm_used': 0,
            'llm_fallbacks': 0,
            'total_time': 0.0,
        }

    @property
    def mode(self) -> Mode:
        return self.mode_state.mode

    async def process(
        self,
        result: TranscriptionResult,
        context: Union[CorrectionContext, bool],
        config: Optional[PipelineConfig] = None,
    ) -> TranscriptionResult:
        """
        Correct a transcription.

        Args:
            result: Raw transcription
            context: Target application context, or a plain is-dev-app flag
            config: Correction switches. Defaults to PipelineConfig().

        Returns:
            The input result when nothing changed, otherwise a corrected copy
            with original_text set to the input text.
        """
        config = config or PipelineConfig()
        is_dev_app = context.is_dev_app if isinstance(context, CorrectionContext) else bool(context)

        if not is_dev_app or not config.dev_correction_enabled:
            return result

        async with self.mode_state.lock:
            start_time = time.time()
            self.performance_metrics['processed'] += 1

            text = result.text
            detected, remainder = self.detector.detect(text)
            if detected is not None:
                self.mode_state.set_mode(detected)
                if not remainder.strip():
                    # Mode-only utterance: nothing to type
                    return result.with_correction("")
                text = remainder

            mode = self.mode_state.mode
            text = self.preprocessor.preprocess(text, mode)

            if mode != Mode.NONE:
                text = await self._correct(text, mode, config)

            text = postprocess(text)
            self.performance_metrics['total_time'] += time.time() - start_time

            if text == result.text:
                return result

            self.performance_metrics['corrected'] += 1
            logger.debug(f"Corrected ({mode.value}): {result.text!r} -> {text!r}")
            return result.with_correction(text)

    async def _correct(self, text: str, mode: Mode, config: PipelineConfig) -> str:
        """Apply LLM or rule-based correction for a non-plain mode."""
        spec = get_spec(mode)

        if config.llm_correction_enabled and self.llm_corrector is not None:
            looks_correctable = should_apply_correction(text)

            try:
                available = self.llm_corrector.available()
                if available and (config.llm_always_apply or looks_correctable):
                    corrected = await self.llm_corrector.correct(text, get_prompt(mode))
                    self.performance_metrics['llm_used'] += 1
                    return corrected
                if not available:
                    logger.debug(f"LLM corrector {self.llm_corrector.name} not available")
            except CorrectionError as e:
                self.performance_metrics['llm_fallbacks'] += 1
                logger.warning(f"LLM correction failed, falling back: {e}")
            except Exception as e:
                self.performance_metrics['llm_fallbacks'] += 1
                logger.error(f"Unexpected LLM corrector error, falling back: {e}", exc_info=True)

        if spec.requires_symbol_conversion:
            return self.rule_corrector.correct(text)
        return text

    def get_performance_metrics(self) -> Dict[str, Any]:
        """Get pipeline performance counters."""
        return self.performance_metrics.copy()
