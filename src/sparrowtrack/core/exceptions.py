class DomainError(Exception):
    """Base class for attendance engine errors."""


class ValidationError(DomainError):
    """Raised when caller input (a date, a month, a clock time) is malformed."""


class RecordStoreError(DomainError):
    """Raised by a record store when its data cannot be read."""
