from __future__ import annotations


class GstDataFetchError(RuntimeError):
    """Raised when the invoice store cannot be read; aborts report generation."""

    def __init__(self, message: str = "Failed to fetch GST data") -> None:
        super().__init__(message)
        self.message = message
