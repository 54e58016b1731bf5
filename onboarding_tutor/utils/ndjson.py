"""
Newline-delimited JSON framing for progress streams.
"""

from collections.abc import AsyncIterator, Callable
from contextlib import aclosing
from typing import TypeVar

from pydantic import BaseModel

NDJSON_MEDIA_TYPE = "application/x-ndjson"

E = TypeVar("E", bound=BaseModel)


async def ndjson_lines(
    events: AsyncIterator[E],
    project: Callable[[E], BaseModel] | None = None,
) -> AsyncIterator[str]:
    """
    Serialize each event as one camelCase JSON line.

    `project` maps an event to its client-facing shape before serialization.
    Closing this iterator closes `events` as well.
    """
    async with aclosing(events):
        async for event in events:
            payload = project(event) if project else event
            yield payload.model_dump_json(by_alias=True) + "\n"
