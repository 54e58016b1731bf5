"""
Exception hierarchy for curriculum and quiz generation.

Generators catch these (and anything else) at their boundary and turn them into
a terminal `error` progress event. Nothing here is retried.
"""


class GenerationError(Exception):
    """Base exception for content generation failures."""

    pass


class MissingInputError(GenerationError):
    """A required input is absent (no profile, no technologies)."""

    pass


class JSONParseError(GenerationError):
    """The LLM response had no fenced JSON block, or the block was invalid."""

    pass


class LLMError(GenerationError):
    """LLM transport or provider errors (HTTP status, timeouts, bad stream)."""

    pass
