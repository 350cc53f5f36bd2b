from enum import IntEnum

from docwire.core.errors import UnknownFieldError


class PersonField(IntEnum):
    """
    Closed set of Person fields. The value of each member is its
    ordinal position, iteration order is the declared wire order.
    """
    ID      = 0
    NAME    = 1
    EMAIL   = 2

    @property
    def key(self) -> str:
        return _PERSON_KEYS[self]

    @classmethod
    def keys(cls) -> tuple[str, ...]:
        return tuple(member.key for member in cls)

    @classmethod
    def from_key(cls, key: object) -> "PersonField":
        try:
            return _PERSON_BY_KEY[key]  # type: ignore[index]
        except (KeyError, TypeError):
            raise UnknownFieldError("Person", key) from None


class DocumentField(IntEnum):
    """
    Closed set of Document fields, see PersonField.
    """
    ID      = 0
    NAME    = 1
    AUTHORS = 2
    CONTENT = 3

    @property
    def key(self) -> str:
        return _DOCUMENT_KEYS[self]

    @classmethod
    def keys(cls) -> tuple[str, ...]:
        return tuple(member.key for member in cls)

    @classmethod
    def from_key(cls, key: object) -> "DocumentField":
        try:
            return _DOCUMENT_BY_KEY[key]  # type: ignore[index]
        except (KeyError, TypeError):
            raise UnknownFieldError("Document", key) from None


_PERSON_KEYS: dict[PersonField, str] = {
    PersonField.ID:     "id",
    PersonField.NAME:   "name",
    PersonField.EMAIL:  "email",
}

_DOCUMENT_KEYS: dict[DocumentField, str] = {
    DocumentField.ID:       "id",
    DocumentField.NAME:     "name",
    DocumentField.AUTHORS:  "authors",
    DocumentField.CONTENT:  "content",
}

_PERSON_BY_KEY = {key: member for member, key in _PERSON_KEYS.items()}
_DOCUMENT_BY_KEY = {key: member for member, key in _DOCUMENT_KEYS.items()}
