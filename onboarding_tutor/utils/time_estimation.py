"""
Utility functions for reading and formatting task time estimates.
"""

import re
from typing import Literal

DEFAULT_TASK_MINUTES = 30

_NUMBER_PATTERN = re.compile(r"(\d+)")


def parse_estimated_minutes(estimated_time: str | None) -> int:
    """
    Read the first integer of a free-text estimate as minutes.

    "30分" -> 30, "about 45 minutes" -> 45, "" -> 30.
    """
    match = _NUMBER_PATTERN.search(estimated_time or "")
    return int(match.group(1)) if match else DEFAULT_TASK_MINUTES


def format_minutes(minutes: int, language: Literal["ja", "en"] = "ja") -> str:
    """
    Format minutes as a human-readable duration.

    ja: "45分", "2時間", "1時間30分"
    en: "45 min", "2 h", "1 h 30 min"
    """
    if language == "en":
        if minutes < 60:
            return f"{minutes} min"
        hours, mins = divmod(minutes, 60)
        return f"{hours} h {mins} min" if mins else f"{hours} h"

    if minutes < 60:
        return f"{minutes}分"
    hours, mins = divmod(minutes, 60)
    return f"{hours}時間{mins}分" if mins else f"{hours}時間"
