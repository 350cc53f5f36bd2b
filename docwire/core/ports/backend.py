from typing import Protocol, TypeVar

from docwire.core.models.record import Document, Person

Record = Person | Document
R = TypeVar("R", Person, Document)


class Backend(Protocol):
    """
    Binds one of the two codec protocols to one binary wire format.

    Implementations must be:
    - pure (no state shared between calls)
    - interchangeable: any record run through any backend comes back equal
    - fail closed on decode
    Byte layouts and sizes are backend specific.
    """

    name: str

    def encode(self, record: Record) -> bytes:
        """Encode a Person or a Document into an opaque byte buffer."""

    def decode(self, data: bytes, record_type: type[R] = Document) -> R:  # type: ignore[assignment]
        """Rebuild a record of `record_type` from a buffer produced by `encode`."""
