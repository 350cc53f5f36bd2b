class EncodeError(ValueError):
    """Raised when a record cannot be represented by the wire format."""


class DecodeError(ValueError):
    """
    Base class for every failure detected while rebuilding a record.

    Decoding fails closed: the first error aborts the whole decode and
    no partially built record is ever returned to the caller.
    """


class UnknownFieldError(DecodeError):
    def __init__(self, record: str, key: object) -> None:
        super().__init__(f"{record}: unexpected field {key!r}")
        self.record = record
        self.key = key


class DuplicateFieldError(DecodeError):
    def __init__(self, record: str, key: str) -> None:
        super().__init__(f"{record}: duplicate field {key!r}")
        self.record = record
        self.key = key


class ArityError(DecodeError):
    """The input does not carry exactly the declared set of fields."""


class FieldCountError(ArityError):
    def __init__(self, record: str, expected: int, found: int) -> None:
        super().__init__(f"{record}: expected {expected} fields, found {found}")
        self.record = record
        self.expected = expected
        self.found = found


class MissingFieldError(ArityError):
    def __init__(self, record: str, keys: list[str]) -> None:
        super().__init__(f"{record}: missing field(s) {', '.join(keys)}")
        self.record = record
        self.keys = keys


class TrailingDataError(ArityError):
    def __init__(self, remaining: int, unit: str = "byte") -> None:
        super().__init__(f"{remaining} {unit}(s) left after the last field")
        self.remaining = remaining
        self.unit = unit


class BackendError(DecodeError):
    """Raised by the struct based wire formats on corrupted input."""


class TruncatedInputError(BackendError):
    def __init__(self, needed: int, available: int) -> None:
        super().__init__(f"truncated input: needed {needed} byte(s), {available} available")
        self.needed = needed
        self.available = available


class MalformedInputError(BackendError):
    pass
