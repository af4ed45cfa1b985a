"""
Common helpers
--------------

Error hierarchy and HTTP retry helper shared by every pipeline layer.
"""

from .errors import (  # noqa: F401
    ConfigError,
    DegenerateInputError,
    DuplicateKeyError,
    ParseError,
    PipelineError,
    PipelineStageError,
)

__all__ = [
    "PipelineError",
    "ParseError",
    "DegenerateInputError",
    "DuplicateKeyError",
    "ConfigError",
    "PipelineStageError",
]
