# decorquote/errors.py
from __future__ import annotations


class DecorQuoteError(Exception):
    """Base class for errors raised by decorquote."""


class StorageError(DecorQuoteError):
    """The storage backend failed in a way the caller cannot branch on (disk full, permissions...)."""

    def __init__(self, key: str, cause: Exception):
        super().__init__(f"storage failure on key {key!r}: {cause}")
        self.key = key
        self.cause = cause


class PaymentSplitError(DecorQuoteError, ValueError):
    def __init__(self, observed: float):
        super().__init__(
            f"Payment percentages must add up to 100% (currently {observed:g}%)"
        )
        self.observed = observed
