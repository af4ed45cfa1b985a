from __future__ import annotations

from typing import Optional


class PipelineError(Exception):
    """Base class for every error raised by the sanitation x income pipeline."""


class ParseError(PipelineError, ValueError):
    """
    A cell value could not be converted to a number.

    `country` and `year` are filled in by the reshaper when the failing
    token comes from a wide table; the bare parser only knows the token.
    """

    def __init__(
        self,
        token: object,
        *,
        country: Optional[str] = None,
        year: Optional[int] = None,
        reason: Optional[str] = None,
    ) -> None:
        self.token = token
        self.country = country
        self.year = year
        self.reason = reason

        location = ""
        if country is not None or year is not None:
            location = f" (country={country!r}, year={year!r})"
        detail = f": {reason}" if reason else ""
        super().__init__(f"Cannot parse {token!r} as a number{location}{detail}")


class DegenerateInputError(PipelineError, ValueError):
    """The model fitter received too few observations or a constant predictor."""


class DuplicateKeyError(PipelineError, ValueError):
    """A long table handed to the joiner repeats a (country, year) key."""


class ConfigError(PipelineError):
    """An environment variable holds a value the pipeline cannot use."""


class PipelineStageError(PipelineError):
    """Raised by the driver to report which stage of the run failed."""

    def __init__(self, stage: str, cause: BaseException) -> None:
        self.stage = stage
        self.cause = cause
        super().__init__(f"Stage {stage!r} failed: {type(cause).__name__}: {cause}")


__all__ = [
    "PipelineError",
    "ParseError",
    "DegenerateInputError",
    "DuplicateKeyError",
    "ConfigError",
    "PipelineStageError",
]
