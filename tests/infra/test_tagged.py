import pytest

from docwire.core.errors import (
    MalformedInputError,
    MissingFieldError,
    TrailingDataError,
    TruncatedInputError,
    UnknownFieldError,
)
from docwire.core.models.fields import PersonField
from docwire.core.models.record import ContentKind, Document, Person
from docwire.infra.buffer import U32, U64, ByteReader
from docwire.infra.tagged import Tag, TaggedBackend, TaggedDeserializer


def u64(value: int) -> bytes:
    return bytes([Tag.U64]) + U64.pack(value)


def text(value: str) -> bytes:
    raw = value.encode("utf-8")
    return bytes([Tag.STR]) + U32.pack(len(raw)) + raw


def struct(entries: list[tuple[str, bytes]], end: bool = True) -> bytes:
    out = bytearray([Tag.STRUCT])
    for key, value in entries:
        out += bytes([Tag.KEY, len(key)]) + key.encode() + value
    if end:
        out.append(Tag.END)
    return bytes(out)


ALICE = [("id", u64(1)), ("name", text("Alice")), ("email", text("alice@example.com"))]


@pytest.fixture
def tagged():
    return TaggedBackend()


@pytest.mark.ut
def test_person_layout(tagged, alice):
    assert tagged.encode(alice) == struct(ALICE)


@pytest.mark.ut
def test_document_layout(tagged, document, alice, bob):
    expected = struct([
        ("id", u64(829472904)),
        ("name", text("stuff.txt")),
        ("authors", bytes([Tag.SEQ]) + U32.pack(2) + tagged.encode(alice) + tagged.encode(bob)),
        ("content", text("")),
    ])

    assert tagged.encode(document) == expected


@pytest.mark.ut
def test_binary_content_tag():
    backend = TaggedBackend(content=ContentKind.binary)
    data = backend.encode(Document(id=1, name="b", content=b"\x01"))

    assert data.endswith(bytes([Tag.BYTES]) + U32.pack(1) + b"\x01" + bytes([Tag.END]))


@pytest.mark.ut
def test_decode_ignores_field_order(tagged, alice):
    assert tagged.decode(struct(list(reversed(ALICE))), Person) == alice


@pytest.mark.ut
def test_unknown_field(tagged):
    with pytest.raises(UnknownFieldError):
        tagged.decode(struct(ALICE + [("age", u64(30))]), Person)


@pytest.mark.ut
def test_missing_field(tagged):
    with pytest.raises(MissingFieldError) as exc:
        tagged.decode(struct(ALICE[:2]), Person)

    assert exc.value.keys == ["email"]


@pytest.mark.ut
def test_missing_end_tag(tagged):
    with pytest.raises(TruncatedInputError):
        tagged.decode(struct(ALICE, end=False), Person)


@pytest.mark.ut
def test_value_where_key_expected(tagged):
    data = struct(ALICE, end=False) + u64(3)

    with pytest.raises(MalformedInputError):
        tagged.decode(data, Person)


@pytest.mark.ut
def test_wrong_value_tag(tagged):
    with pytest.raises(MalformedInputError):
        tagged.decode(struct([("id", text("1"))] + ALICE[1:]), Person)


@pytest.mark.ut
def test_not_a_struct(tagged):
    with pytest.raises(MalformedInputError):
        tagged.decode(u64(1), Person)


@pytest.mark.ut
def test_trailing_after_end(tagged):
    with pytest.raises(TrailingDataError):
        tagged.decode(struct(ALICE) + bytes([Tag.END]), Person)


@pytest.mark.ut
def test_end_rejects_unread_entries():
    def first_entry_only(access):
        access.next_key(PersonField.from_key)
        access.next_value(lambda de: de.deserialize_u64())
        access.end()

    de = TaggedDeserializer(ByteReader(struct(ALICE), max_length=1024))

    with pytest.raises(TrailingDataError):
        de.deserialize_struct("Person", first_entry_only)
