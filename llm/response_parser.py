"""
Extraction of structured analyses from raw model output.

Models often wrap JSON in a markdown fence:

    ```json
    {"overallAssessment": ...}
    ```

Only that exact convention is tolerated: an opening "```json" marker at the
very start and a closing "```" at the very end (after trimming). Any other
wrapping is left in place and will fail to parse.
"""

from __future__ import annotations

import json
import logging

from core.exceptions import DataValidationError, MalformedResponseError
from core.structured_log import jlog
from core.types import AnalysisResult

logger = logging.getLogger(__name__)

JSON_FENCE_OPEN = "```json"
FENCE_CLOSE = "```"


def strip_json_fence(raw_text: str) -> str:
    """
    Remove a ```json ... ``` wrapper from model output.

    Trims whitespace, then strips exactly len("```json") leading characters
    if the text starts with the opening marker, then exactly len("```")
    trailing characters if it ends with the closing marker.
    """
    text = raw_text.strip()
    if text.startswith(JSON_FENCE_OPEN):
        text = text[len(JSON_FENCE_OPEN):]
    if text.endswith(FENCE_CLOSE):
        text = text[:-len(FENCE_CLOSE)]
    return text


def parse_analysis_text(raw_text: str) -> AnalysisResult:
    """
    Parse the proxy's "text" field into an AnalysisResult.

    All-or-nothing: either a complete result is returned or
    MalformedResponseError is raised. The raw text is logged for diagnostics
    but never placed in the error message.

    Raises:
        MalformedResponseError: text is not valid JSON of the expected shape
    """
    try:
        payload = json.loads(strip_json_fence(raw_text))
        return AnalysisResult.from_dict(payload)
    except (ValueError, RecursionError, DataValidationError, AttributeError, TypeError) as e:
        logger.error(f"Failed to parse analysis response: {e}")
        logger.debug(f"Raw analysis response: {raw_text!r}")
        jlog("analysis_parse_failed", level="ERROR", error=str(e), raw_text=raw_text)
        raise MalformedResponseError(context={"reason": type(e).__name__}, cause=e) from e
