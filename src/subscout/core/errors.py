"""Custom exception types for Subscout.

Only contract violations and configuration problems are raised to callers.
Data-quality problems inside a message (no amount, a date that does not
exist) never raise; extractors degrade the affected field to absent.
"""


class SubscoutError(Exception):
    """Base exception for all Subscout errors."""

    pass


class ConfigValidationError(SubscoutError):
    """Raised when config.yaml fails Pydantic validation.

    Includes specific field errors with actionable messages.
    """

    pass


class ConfigLoadError(SubscoutError):
    """Raised when config.yaml cannot be loaded (file not found, YAML parse error)."""

    pass


class InvalidInputError(SubscoutError):
    """Raised when the caller hands the extractor a malformed batch.

    Examples: the batch is not iterable, an item is neither an InputMessage
    nor a mapping, or a mapping has no message id.

    Attributes:
        index: Position of the offending item in the batch (None for the batch itself)
    """

    def __init__(self, message: str, index: int | None = None):
        super().__init__(message)
        self.index = index


class FieldParseError(SubscoutError):
    """Raised inside an extractor when a matched substring cannot be parsed.

    This is a non-fatal error: the extractor catches it at its boundary,
    logs it and reports the field as absent.

    Attributes:
        field: Which candidate field was being parsed (e.g. "start_date")
        raw: The matched substring that failed to parse
    """

    def __init__(self, message: str, field: str, raw: str):
        super().__init__(message)
        self.field = field
        self.raw = raw
