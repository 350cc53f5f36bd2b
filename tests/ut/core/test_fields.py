import pytest

from docwire.core.errors import DecodeError, UnknownFieldError
from docwire.core.models.fields import DocumentField, PersonField
from docwire.core.models.record import Document, Person


@pytest.mark.ut
def test_person_field_order_and_keys():
    assert [f.value for f in PersonField] == [0, 1, 2]
    assert PersonField.keys() == ("id", "name", "email")


@pytest.mark.ut
def test_document_field_order_and_keys():
    assert [f.value for f in DocumentField] == [0, 1, 2, 3]
    assert DocumentField.keys() == ("id", "name", "authors", "content")


@pytest.mark.ut
def test_field_keys_match_record_attributes():
    assert PersonField.keys() == tuple(Person.__dataclass_fields__)
    assert DocumentField.keys() == tuple(Document.__dataclass_fields__)


@pytest.mark.ut
@pytest.mark.parametrize("field", list(PersonField))
def test_person_from_key_roundtrip(field):
    assert PersonField.from_key(field.key) is field


@pytest.mark.ut
@pytest.mark.parametrize("field", list(DocumentField))
def test_document_from_key_roundtrip(field):
    assert DocumentField.from_key(field.key) is field


@pytest.mark.ut
@pytest.mark.parametrize("key", ["age", "ID", "", "authors", 0, b"id", None, ["id"]])
def test_person_from_key_rejects_unknown(key):
    with pytest.raises(UnknownFieldError) as exc:
        PersonField.from_key(key)

    assert exc.value.record == "Person"
    assert exc.value.key == key


@pytest.mark.ut
def test_document_from_key_rejects_unknown():
    with pytest.raises(DecodeError):
        DocumentField.from_key("email")
