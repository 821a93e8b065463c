# core/errors.py
from __future__ import annotations
from typing import Optional

GENERATION_FAILED = "GENERATION_FAILED"
CONTENT_GENERATION_FAILED = "CONTENT_GENERATION_FAILED"
BLOCK_MAPPING_MISMATCH = "BLOCK_MAPPING_MISMATCH"
GENERATION_IN_PROGRESS = "GENERATION_IN_PROGRESS"


class PipelineError(Exception):
    """Error carrying a stable machine-readable code for the terminal SSE event."""

    code = GENERATION_FAILED

    def __init__(self, message: str, code: Optional[str] = None, recoverable: bool = False):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code
        self.recoverable = recoverable


class ContentGenerationError(PipelineError):
    code = CONTENT_GENERATION_FAILED


class BlockMappingError(PipelineError):
    code = BLOCK_MAPPING_MISMATCH


class GenerationInProgressError(PipelineError):
    code = GENERATION_IN_PROGRESS


def error_code(e: BaseException) -> str:
    return e.code if isinstance(e, PipelineError) else GENERATION_FAILED
