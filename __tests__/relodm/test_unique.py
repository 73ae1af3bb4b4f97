import pytest
from bson import ObjectId

from relodm import DuplicatedSchemaField, KeyField, Model, ModelField, NotRegistered


class Account(Model):
    id: ObjectId = KeyField(default_factory=ObjectId, unique=True)
    username: str = ModelField(unique=True)
    email: str = ModelField(unique=True, convert=str.lower)
    bio: str = ""


class Note(Model):
    id: ObjectId = KeyField(default_factory=ObjectId)
    text: str = ModelField()


@pytest.fixture()
def accounts(mapper):
    return mapper.add_schema(Account).add_schema(Note)


def test_no_unique_fields(accounts):
    note = Note(text="hello").save()
    other = Note(text="hello")
    other.check_unique()
    accounts.check_unique(note)


def test_duplicated_field(accounts):
    Account(username="nongoose", email="a@example.com").save()

    with pytest.raises(DuplicatedSchemaField) as exc_info:
        Account(username="nongoose", email="b@example.com").save()
    assert exc_info.value.field == "username"
    assert exc_info.value.value == "nongoose"
    assert str(exc_info.value) == "Duplicated schema field (username): nongoose"
    assert accounts.count(Account) == 1


def test_same_identity_is_not_a_conflict(accounts):
    account = Account(username="nongoose", email="a@example.com").save()
    account.bio = "updated"
    account.save()
    account.check_unique()
    assert accounts.count(Account) == 1


def test_convert_is_applied_before_the_query(store, accounts):
    Account(username="first", email="dup@example.com").save()
    with pytest.raises(DuplicatedSchemaField) as exc_info:
        Account(username="second", email="DUP@example.com").save()
    assert exc_info.value.field == "email"
    assert exc_info.value.value == "DUP@example.com"


def test_none_values_are_skipped(accounts):
    class Profile(Model):
        id: ObjectId = KeyField(default_factory=ObjectId)
        handle: str | None = ModelField(default=None, unique=True)

    accounts.add_schema(Profile)
    Profile().save()
    Profile().save()
    assert accounts.count(Profile) == 2


def test_check_unique_needs_registration(mapper):
    class Loose(Model):
        id: ObjectId = KeyField(default_factory=ObjectId)
        name: str = ModelField(unique=True)

    with pytest.raises(NotRegistered):
        mapper.check_unique(Loose(name="x"))
