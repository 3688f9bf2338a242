"""
Domain errors.

All errors are raised synchronously where the bad input is detected and are
never retried: the same input always fails the same way. They subclass
ValueError so pydantic validators can raise them directly.
"""


class OJTError(ValueError):
    """Base class for all OJT log errors"""


class InvalidTimeFormat(OJTError):
    """A clock time could not be parsed as HH:MM"""

    def __init__(self, value):
        self.value = value
        super().__init__(f"Invalid time format: {value!r} (expected HH:MM)")


class InvalidTarget(OJTError):
    """The required-hours target is zero or negative"""

    def __init__(self, required_hours):
        self.required_hours = required_hours
        super().__init__(f"Required hours must be positive, got {required_hours}")


class InvalidPageSize(OJTError):
    """The page size for the log table is zero or negative"""

    def __init__(self, page_size):
        self.page_size = page_size
        super().__init__(f"Page size must be positive, got {page_size}")


class EmptyEntry(OJTError):
    """An entry was submitted without any tasks"""

    def __init__(self):
        super().__init__("An entry must contain at least one task")


class RecordNotFound(OJTError):
    """
    The record does not exist for this owner.

    Raised both for missing ids and for ids that belong to another owner,
    so callers cannot tell foreign records from missing ones.
    """

    def __init__(self, kind: str, record_id):
        self.kind = kind
        self.record_id = record_id
        super().__init__(f"{kind} {record_id} not found")
