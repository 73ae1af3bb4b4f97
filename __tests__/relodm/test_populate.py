from typing import Any, Optional

import pytest
from bson import ObjectId

from relodm import KeyField, Model, ModelField, RelationField


class Author(Model):
    id: ObjectId = KeyField(default_factory=ObjectId)
    username: str = ModelField(unique=True)
    posts: list["Post"] = RelationField(one_to_many="Post")
    drafts: list["Draft"] = RelationField(one_to_many="Draft")


class Post(Model):
    id: ObjectId = KeyField(default_factory=ObjectId)
    title: str = ModelField()
    author: Optional[Author] = RelationField(many_to_one="Author")
    author_id: Optional[ObjectId] = ModelField(default=None)


class Draft(Model):
    id: ObjectId = KeyField(default_factory=ObjectId)
    title: str = ModelField()
    writer: Optional[Author] = RelationField(many_to_one=Author)
    writer_id: Optional[ObjectId] = ModelField(default=None)


class Passport(Model):
    id: str = KeyField()
    country: str = ModelField()


class Citizen(Model):
    id: ObjectId = KeyField(default_factory=ObjectId)
    name: str = ModelField()
    passport: Optional[Passport] = RelationField(one_to_one=Passport)
    passport_id: Optional[str] = ModelField(default=None)


class Forum(Model):
    id: ObjectId = KeyField(default_factory=ObjectId)
    name: str = ModelField()
    threads: list["ForumThread"] = RelationField(one_to_many="ForumThread")


class ForumThread(Model):
    id: ObjectId = KeyField(default_factory=ObjectId)
    subject: str = ModelField()
    # Topic is never defined
    topic: Optional[Any] = RelationField(many_to_one="Topic")
    topic_id: Optional[ObjectId] = ModelField(default=None)
    forum: Optional[Forum] = RelationField(many_to_one=Forum)
    forum_id: Optional[ObjectId] = ModelField(default=None)


@pytest.fixture()
def blog(mapper):
    return mapper.add_schema(Author).add_schema(Post).add_schema(Passport).add_schema(Citizen)


def test_populate_many_to_one(blog):
    author = Author(username="nongoose").save()
    post = Post(title="Nongoose example", author_id=author.id).save()

    loaded = blog.find_by_id(Post, post.id)
    assert loaded.author is None
    result = loaded.populate("author")
    assert result is loaded
    assert loaded.author == author
    assert loaded.author_id == author.id


def test_populate_many_to_one_missing_document(blog):
    post = Post(title="Orphan", author_id=ObjectId()).save()
    post.populate("author")
    assert post.author is None


def test_populate_many_to_one_without_foreign_key(blog):
    post = Post(title="No author").save()
    post.populate("author")
    assert post.author is None


def test_populate_one_to_many(blog):
    author = Author(username="nongoose").save()
    other = Author(username="other").save()
    titles = ["Nongoose example 1", "Nongoose example 2", "Nongoose example 3"]
    for title in titles:
        Post(title=title, author=author).save()
    Post(title="Somebody else", author=other).save()
    Post(title="Nobody").save()

    author.populate("posts")
    assert [post.title for post in author.posts] == titles
    assert all(post.author_id == author.id for post in author.posts)


def test_populate_one_to_many_empty(blog):
    author = Author(username="lonely").save()
    author.posts = [Post(title="stale")]
    author.populate("posts")
    assert author.posts == []


def test_populate_one_to_many_unregistered_target(blog):
    # Draft was never added to the mapper, so its reverse link is unknown
    author = Author(username="nongoose").save()
    blog.store.insert_one("drafts", {"_id": ObjectId(), "title": "draft", "writer_id": author.id})

    author.populate("drafts")
    assert author.drafts == []


def test_populate_one_to_one(blog):
    passport = Passport(id="AR-123", country="AR").save()
    citizen = Citizen(name="Daniel", passport_id=passport.id).save()

    citizen.populate("passport")
    assert citizen.passport == passport


def test_populate_unknown_field(blog):
    author = Author(username="nongoose").save()
    before = author.model_copy(deep=True)
    assert author.populate("nonexistent_field") is author
    assert author == before
    assert author.populate("username") is author


def test_populate_leaves_other_fields_alone(blog):
    author = Author(username="nongoose").save()
    post = Post(title="kept", author_id=author.id).save()
    post.title = "changed in memory"
    post.populate("author")
    assert post.title == "changed in memory"


def test_populate_reports_decode_errors(blog):
    from relodm import DecodeError

    author = Author(username="nongoose").save()
    blog.store.insert_one("posts", {"_id": ObjectId(), "title": 42, "author_id": author.id})
    with pytest.raises(DecodeError):
        author.populate("posts")


def test_populate_one_to_many_skips_undefined_relations(mapper):
    mapper.add_schema(Forum).add_schema(ForumThread)
    forum = Forum(name="general").save()
    ForumThread(subject="welcome", forum=forum, topic_id=ObjectId()).save()
    ForumThread(subject="rules", forum=forum).save()

    forum.populate("threads")
    assert [thread.subject for thread in forum.threads] == ["welcome", "rules"]


def test_populate_undefined_target_is_noop(mapper):
    mapper.add_schema(Forum).add_schema(ForumThread)
    thread = ForumThread(subject="welcome", topic_id=ObjectId()).save()

    thread.populate("topic")
    assert thread.topic is None
