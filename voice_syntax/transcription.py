"""
Transcription result value passed through the correction pipeline.

The speech-recognition layer produces a TranscriptionResult; the pipeline
never mutates it and hands back a derived copy when the text changed.
"""

from typing import Optional
from dataclasses import dataclass, replace


@dataclass(frozen=True)
class TranscriptionResult:
    """Complete transcription result with correction metadata."""
    text: str                               # Transcribed (or corrected) text
    confidence: Optional[float] = None      # 0.0 - 1.0 if the engine reports it
    processing_time: float = 0.0            # Seconds spent transcribing
    was_corrected: bool = False             # True once the pipeline rewrote the text
    original_text: Optional[str] = None     # Pre-correction text, only when corrected

    def with_correction(self, corrected_text: str) -> "TranscriptionResult":
        """
        Create a corrected copy of this result.

        Args:
            corrected_text: Text produced by the correction pipeline

        Returns:
            New result marked as corrected, remembering the current text.
        """
        return replace(
            self,
            text=corrected_text,
            was_corrected=True,
            original_text=self.text,
        )
