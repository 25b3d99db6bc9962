"""Exception types shared across verbi."""

from __future__ import annotations


class VerbiError(Exception):
    """Base class for errors raised by verbi."""


class ConfigError(VerbiError):
    """Invalid or incomplete configuration. Fatal, never retried."""

    retryable = False


class SourceParseError(VerbiError):
    """A source file could not be parsed into a syntax tree."""

    def __init__(self, file: str, line: int, column: int, detail: str = "syntax error") -> None:
        super().__init__(f"{file}:{line}:{column}: {detail}")
        self.file = file
        self.line = line
        self.column = column


class NoProviderError(VerbiError):
    """No routing rule and no fallback matched a locale pair."""

    retryable = False


class BatchError(VerbiError):
    """A batch failed after exhausting its retries."""

    def __init__(self, message: str, batch_number: int, total_batches: int) -> None:
        super().__init__(message)
        self.batch_number = batch_number
        self.total_batches = total_batches


class RetryableError(VerbiError):
    """Provider error carrying an explicit retry decision.

    ``retryable=False`` makes :func:`verbi.translation.retry.with_retry`
    give up immediately (e.g. exhausted quota).
    """

    def __init__(
        self,
        message: str,
        retryable: bool = True,
        retry_after: float | None = None,
    ) -> None:
        super().__init__(message)
        self.retryable = retryable
        self.retry_after = retry_after
