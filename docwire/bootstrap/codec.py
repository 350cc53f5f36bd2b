from docwire.bootstrap.deps import get_backend
from docwire.core.models.record import Document, Person
from docwire.core.ports.backend import Backend


def encode(record: Person | Document, backend: Backend | None = None) -> bytes:
    """Encode `record` with `backend`, or with the configured backend."""
    return (backend or get_backend()).encode(record)


def decode(data: bytes, record_type: type = Document, backend: Backend | None = None) -> Person | Document:
    """Decode a `record_type` from `data`, see encode()."""
    return (backend or get_backend()).decode(data, record_type)
