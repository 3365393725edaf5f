"""
utils/errors.py
---------------
Error taxonomy shared by every layer.

    InvalidInput  - empty, insecure or malformed field value.
    OutOfRange    - value longer than its field allows.
    StorageError  - database failure, or a stored row that is no longer
                    a valid posting. Always raised `from` the original cause.
"""


class LostPawsError(Exception):
    """Base class for all application errors."""


class InvalidInput(LostPawsError, ValueError):
    """A field value is empty, insecure or malformed."""

    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field


class OutOfRange(LostPawsError, ValueError):
    """A field value exceeds its length limit."""

    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field


class StorageError(LostPawsError):
    """The store rejected or failed an operation."""
