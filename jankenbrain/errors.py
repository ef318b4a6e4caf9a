from __future__ import annotations


class JankenBrainError(Exception):
    """Base class for errors raised by jankenbrain."""


class OptionsError(JankenBrainError, ValueError):
    """Options value out of range, non-finite, wrongly typed or unknown."""


class RecordError(JankenBrainError, ValueError):
    """A raw record could not be turned into a Record at all."""
