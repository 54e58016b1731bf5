"""
Utility functions for parsing JSON responses from LLMs.

Only a fenced ```json block is accepted. Bare JSON or a block in another
language is treated as a parse failure, not repaired.
"""

import json
import logging
import re
from typing import Any

from onboarding_tutor.agents.exceptions import JSONParseError

logger = logging.getLogger(__name__)

FENCED_JSON_PATTERN = re.compile(r"```json\s*([\s\S]*?)\s*```")


def extract_fenced_json(response_text: str) -> Any:
    """
    Parse the first ```json fenced block of an LLM response.

    Args:
        response_text: Raw accumulated response text

    Returns:
        Parsed JSON value

    Raises:
        JSONParseError: If there is no fenced block or its content is invalid JSON
    """
    match = FENCED_JSON_PATTERN.search(response_text or "")
    if not match:
        logger.warning(f"⚠️  No fenced JSON block in response ({len(response_text or '')} chars)")
        logger.debug(f"   Response preview: {(response_text or '')[:200]}")
        raise JSONParseError("Failed to parse LLM response: no ```json block found")

    block = match.group(1)
    try:
        return json.loads(block)
    except json.JSONDecodeError as e:
        logger.error(f"❌ Invalid JSON in fenced block: {e}")
        logger.debug(f"   Attempted to parse: {block[:500]}")
        raise JSONParseError(f"Failed to parse LLM response: {e}") from e
