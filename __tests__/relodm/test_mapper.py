from typing import Optional

import pytest
from bson import ObjectId

from relodm import KeyField, Mapper, Model, ModelField, NotRegistered, RelationField, SchemaConflict, SchemaRegistry


class Member(Model):
    id: ObjectId = KeyField(default_factory=ObjectId)
    username: str = ModelField(unique=True)
    realname: str = ModelField()
    age: int = ModelField()


class Article(Model):
    id: ObjectId = KeyField(default_factory=ObjectId)
    title: str = ModelField()
    writer: Optional[Member] = RelationField(many_to_one=Member)
    writer_id: Optional[ObjectId] = ModelField(default=None)


class Guest(Model):
    _collection_name = "members"
    id: ObjectId = KeyField(default_factory=ObjectId)
    nickname: str = ModelField()


@pytest.fixture()
def club(mapper):
    mapper.add_schema(Member).add_schema(Article)
    members = [
        Member(username="daniel", realname="Daniel Solarte", age=19),
        Member(username="robert", realname="Robert", age=25),
        Member(username="emma", realname="Emma", age=41),
    ]
    for member in members:
        member.save()
    return mapper


def test_add_schema_is_idempotent(store, registry):
    mapper = Mapper(store, registry=registry).add_schema(Member).add_schema(Member)
    assert mapper.schemas == {"members": Member}
    assert mapper.is_registered(Member)
    assert not mapper.is_registered(Article)
    assert registry.lookup("members") is Member.get_schema_info()


def test_add_schema_collection_conflict(store, registry):
    mapper = Mapper(store, registry=registry).add_schema(Member)
    with pytest.raises(SchemaConflict) as exc:
        mapper.add_schema(Guest)
    assert exc.value.collection_name == "members"
    assert "Member" in str(exc.value) and "Guest" in str(exc.value)

    assert not mapper.is_registered(Guest)
    assert mapper.schemas == {"members": Member}
    assert registry.lookup("members") is Member.get_schema_info()
    with pytest.raises(NotRegistered):
        mapper.find(Guest)
    with pytest.raises(NotRegistered):
        mapper.save(Guest(nickname="intruder"))
    with pytest.raises(NotRegistered):
        Guest(nickname="intruder").save()


def test_mapper_uses_default_registry(store):
    mapper = Mapper(store)
    assert mapper.registry is SchemaRegistry.default()


def test_unregistered_operations(mapper):
    for call in (
        lambda: mapper.find_one(Member, {}),
        lambda: mapper.find(Member),
        lambda: mapper.count(Member),
        lambda: mapper.update_many(Member, {}, {"$set": {"age": 1}}),
        lambda: mapper.aggregate(Member, []),
        lambda: mapper.populate(Member(username="x", realname="x", age=1), "posts"),
        lambda: mapper.remove(Member(username="x", realname="x", age=1)),
    ):
        with pytest.raises(NotRegistered):
            call()


def test_find_one(club):
    member = club.find_one(Member, {"username": "robert"})
    assert member is not None
    assert member.realname == "Robert"
    assert club.find_one(Member, {"username": "nobody"}) is None


def test_find(club):
    adults = club.find(Member, {"age": {"$gte": 20}}, sort=[("age", -1)])
    assert [member.username for member in adults] == ["emma", "robert"]
    assert len(club.find(Member)) == 3
    assert len(club.find(Member, limit=2)) == 2


def test_count(club):
    assert club.count(Member) == 3
    assert club.count(Member, {"age": {"$lt": 30}}) == 2
    assert club.count(Member, {"realname": {"$regex": "^Rob"}}) == 1


def test_update_many(club):
    result = club.update_many(Member, {"age": {"$lt": 30}}, {"$inc": {"age": 1}})
    assert result.modified_count == 2
    assert club.find_one(Member, {"username": "daniel"}).age == 20


def test_aggregate(club):
    robert = club.find_one(Member, {"username": "robert"})
    Article(title="Nongoose v0.1.0 released!", writer=robert).save()
    Article(title="Aggregations", writer=robert).save()

    result = club.aggregate(
        Article,
        [
            {"$match": {"title": {"$regex": " "}}},
            {"$group": {"_id": "$writer_id", "articles": {"$sum": 1}}},
        ],
    )
    assert result == [{"_id": robert.id, "articles": 1}]

    titles = club.aggregate(
        Article,
        [{"$sort": {"title": 1}}, {"$project": {"_id": 0, "title": 1}}],
        output=lambda doc: doc["title"],
    )
    assert titles == ["Aggregations", "Nongoose v0.1.0 released!"]


def test_from_database(store, registry):
    mapper = Mapper.from_database(store.database, registry=registry).add_schema(Member)
    member = Member(username="solo", realname="Solo", age=30).save()
    assert mapper.find_by_id(Member, member.id) == member
