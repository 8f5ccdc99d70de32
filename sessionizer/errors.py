"""Exception types shared across sessionizer modules."""

from __future__ import annotations


class SessionizerError(Exception):
    """Base class for errors raised by sessionizer."""


class InvalidInputDataError(SessionizerError, ValueError):
    """Console input could not be decoded into a key.

    Raised for malformed UTF-16 (unpaired or mismatched surrogates) and for
    malformed UTF-8 on byte-stream terminals. Never coerced into a printable
    character.
    """
