from dataclasses import dataclass, field
from enum import StrEnum
from typing import Iterable

U64_MAX = (1 << 64) - 1


class ContentKind(StrEnum):
    """
    Representation used for the `content` field of a Document.
    The choice is made once, by configuration, and never mixed:
    a document carries either text or opaque bytes.
    """
    text = "text"
    binary = "binary"

    def empty(self) -> str | bytes:
        return b"" if self is ContentKind.binary else ""


def _check_u64(record: str, value: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{record}.id must be an int, got {type(value).__name__}")
    if not 0 <= value <= U64_MAX:
        raise ValueError(f"{record}.id out of unsigned 64-bit range: {value}")


def _check_str(record: str, name: str, value: str) -> None:
    if not isinstance(value, str):
        raise TypeError(f"{record}.{name} must be a str, got {type(value).__name__}")


@dataclass(frozen=True)
class Person:
    id: int
    """
    Immutable identity of the person, an unsigned 64-bit integer.
    """

    name: str

    email: str

    def __post_init__(self) -> None:
        _check_u64("Person", self.id)
        _check_str("Person", "name", self.name)
        _check_str("Person", "email", self.email)


@dataclass(frozen=True)
class Document:
    """
    A named payload written by an ordered list of authors.

    The document exclusively owns its authors; the sequence is stored
    as a tuple so that two documents compare equal field by field.
    """
    id: int

    name: str

    authors: tuple[Person, ...] = field(default_factory=tuple)
    """
    Authors in significant order. Any iterable is accepted and frozen
    into a tuple at construction time.
    """

    content: str | bytes = ""
    """
    Either text or an opaque byte sequence, see ContentKind.
    """

    def __post_init__(self) -> None:
        _check_u64("Document", self.id)
        _check_str("Document", "name", self.name)

        authors: Iterable[Person] = self.authors
        object.__setattr__(self, "authors", tuple(authors))
        for author in self.authors:
            if not isinstance(author, Person):
                raise TypeError(f"Document.authors must hold Person, got {type(author).__name__}")

        if isinstance(self.content, bytearray):
            object.__setattr__(self, "content", bytes(self.content))
        elif not isinstance(self.content, (str, bytes)):
            raise TypeError(f"Document.content must be str or bytes, got {type(self.content).__name__}")
