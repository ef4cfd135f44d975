"""Pipeline error kinds."""


class PipelineError(Exception):
    """Base class for sale price pipeline errors."""
    pass


class SkippedRecord(PipelineError):
    """Raw record intentionally excluded by an adapter (not a sale)."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class InvalidRecord(PipelineError):
    """Record is malformed or outside the accepted value range."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class EmptyInput(PipelineError):
    """No records left to bucket."""
    pass
