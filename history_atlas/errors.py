"""Exception types shared across the viewer."""


class HistoryAtlasError(Exception):
    """Base class for viewer errors."""


class DataFetchError(HistoryAtlasError):
    """A dataset could not be fetched or parsed."""

    def __init__(self, source: str, reason: str):
        super().__init__(f"{source}: {reason}")
        self.source = source
        self.reason = reason


class EmptyDomainError(HistoryAtlasError):
    """No record carries a finite time, so the time control has nothing to offer."""


class MalformedRecordError(HistoryAtlasError):
    """A single record is missing required fields or geometry."""
