import logging
from unittest import mock

import pytest

from ..exceptions import DeserializationError, UnknownResourceTypeError
from ..inflection import FuncPluralizer
from ..models import has_many, has_one
from ..registry import ModelRegistry
from ..serde.models import ResourceRepr


def _plural(word):
    return word + "s"


def _singular(word):
    return word[:-1] if word.endswith("s") else word


@pytest.fixture
def pluralizer():
    return FuncPluralizer(_plural, _singular)


@pytest.fixture
def registry():
    registry = ModelRegistry()
    registry.define(
        "product",
        {
            "title": "",
            "about": "",
            "kebabCaseDescription": "",
            "brand": has_one("brands"),
            "tags": has_many("tags"),
            "thumbnails": has_many("images", filter={"kind": "thumbnail"}),
        },
    )
    registry.define("brand", {"name": ""})
    registry.define("tag", {"name": ""})
    registry.define("image", {"kind": "", "url": ""})
    return registry


@pytest.fixture
def warn():
    return mock.Mock()


@pytest.fixture
def target(registry, pluralizer, warn):
    from ..deserializer import ResourceGraphDeserializer

    return ResourceGraphDeserializer(registry, pluralizer, warn=warn)


class TestResource:
    def test_single(self, target, warn):
        result = target.resource(
            {
                "id": "1",
                "type": "products",
                "attributes": {"title": "Lamp", "about": None},
                "meta": {"rev": 3},
                "links": {"self": "/products/1"},
            }
        )
        assert result == {
            "id": "1",
            "type": "products",
            "title": "Lamp",
            "about": None,
            "meta": {"rev": 3},
            "links": {"self": "/products/1"},
        }
        warn.assert_not_called()

    def test_parsed_input(self, target):
        result = target.resource(ResourceRepr(type="products", id="1", attributes=[("title", "x")]))
        assert result == {"id": "1", "type": "products", "title": "x"}

    def test_kebab_case(self, target):
        result = target.resource(
            {
                "id": "1",
                "type": "products",
                "attributes": {"kebab-case-description": "hello"},
            }
        )
        assert result["kebabCaseDescription"] == "hello"
        assert "kebab-case-description" not in result

    def test_unknown_attribute(self, target, warn):
        result = target.resource(
            {
                "id": "1",
                "type": "products",
                "attributes": {"title": "Lamp", "extra-field": 1, "id": "1"},
            }
        )
        assert result == {"id": "1", "type": "products", "title": "Lamp"}
        warn.assert_called_once_with(
            'Resource response for type "products" contains attribute "extra-field", '
            "but it is not present on model config and therefore not deserialized."
        )

    def test_unknown_relationship(self, target, warn):
        result = target.resource(
            {
                "id": "1",
                "type": "products",
                "relationships": {
                    "owner": {"data": {"id": "1", "type": "users"}},
                    "title": {"data": {"id": "1", "type": "titles"}},
                },
            }
        )
        assert result == {"id": "1", "type": "products"}
        assert warn.call_args_list == [
            mock.call(
                'Resource response for type "products" contains relationship "owner", '
                "but it is not present on model config and therefore not deserialized."
            ),
            mock.call(
                'Resource response for type "products" contains relationship "title", '
                "but it is present on model config as a plain attribute."
            ),
        ]

    def test_default_warning_sink(self, registry, pluralizer, caplog):
        from ..deserializer import ResourceGraphDeserializer

        target = ResourceGraphDeserializer(registry, pluralizer)
        with caplog.at_level(logging.WARNING, logger="jsonapi_graph"):
            target.resource({"id": "1", "type": "products", "attributes": {"color": "red"}})
        assert 'contains attribute "color"' in caplog.text

    def test_has_one(self, target):
        result = target.resource(
            {
                "id": "1",
                "type": "products",
                "relationships": {"brand": {"data": {"id": "7", "type": "brands"}}},
            },
            [{"id": "7", "type": "brands", "attributes": {"name": "Acme"}}],
        )
        assert result["brand"] == {"id": "7", "type": "brands", "name": "Acme"}

    def test_has_one_not_included(self, target):
        result = target.resource(
            {
                "id": "1",
                "type": "products",
                "relationships": {
                    "brand": {"data": {"id": "7", "type": "brands", "meta": {"main": True}}}
                },
            },
        )
        assert result["brand"] == {"id": "7", "type": "brands", "meta": {"main": True}}

    def test_has_one_null(self, target):
        result = target.resource(
            {
                "id": "1",
                "type": "products",
                "relationships": {"brand": {"data": None}},
            },
        )
        assert result["brand"] is None

    def test_has_many(self, target):
        result = target.resource(
            {
                "id": "1",
                "type": "products",
                "relationships": {
                    "tags": {
                        "data": [
                            {"id": "6", "type": "tags"},
                            {"id": "5", "type": "tags"},
                        ]
                    }
                },
            },
            [
                {"id": "5", "type": "tags", "attributes": {"name": "five"}},
                {"id": "6", "type": "tags", "attributes": {"name": "six"}},
            ],
        )
        assert result["tags"] == [
            {"id": "6", "type": "tags", "name": "six"},
            {"id": "5", "type": "tags", "name": "five"},
        ]

    def test_has_many_not_included(self, target):
        result = target.resource(
            {
                "id": "1",
                "type": "products",
                "relationships": {
                    "tags": {
                        "data": [
                            {"id": "6", "type": "tags"},
                            {"id": "5", "type": "tags"},
                        ]
                    },
                    "thumbnails": {"data": []},
                },
            },
        )
        assert result["tags"] == [
            {"id": "6", "type": "tags"},
            {"id": "5", "type": "tags"},
        ]
        assert result["thumbnails"] == []

    def test_has_many_without_data(self, target):
        result = target.resource(
            {
                "id": "1",
                "type": "products",
                "relationships": {"tags": {"links": {"related": "/products/1/tags"}}},
            },
        )
        assert result["tags"] == []

    def test_partially_included(self, target):
        result = target.resource(
            {
                "id": "1",
                "type": "products",
                "relationships": {
                    "tags": {
                        "data": [
                            {"id": "5", "type": "tags"},
                            {"id": "6", "type": "tags"},
                        ]
                    }
                },
            },
            [{"id": "6", "type": "tags", "attributes": {"name": "six"}}],
        )
        assert result["tags"] == [{"id": "6", "type": "tags", "name": "six"}]

    def test_filter(self, target):
        document = {
            "data": {
                "id": "1",
                "type": "products",
                "relationships": {
                    "thumbnails": {
                        "data": [
                            {"id": "1", "type": "images"},
                            {"id": "2", "type": "images"},
                        ]
                    }
                },
            },
            "included": [
                {"id": "1", "type": "images", "attributes": {"kind": "full"}},
                {"id": "2", "type": "images", "attributes": {"kind": "thumbnail"}},
            ],
        }
        result = target.resource(document["data"], document["included"])
        assert result["thumbnails"] == [{"id": "2", "type": "images", "kind": "thumbnail"}]

        # nothing satisfies the filter
        document["included"][1]["attributes"]["kind"] = "full"
        result = target.resource(document["data"], document["included"])
        assert result["thumbnails"] == [
            {"id": "1", "type": "images"},
            {"id": "2", "type": "images"},
        ]

    def test_without_attributes(self, target):
        result = target.resource(
            {
                "id": "1",
                "type": "products",
                "relationships": {"brand": {"data": {"id": "7", "type": "brands"}}},
            },
            [{"id": "7", "type": "brands"}],
        )
        assert result == {
            "id": "1",
            "type": "products",
            "brand": {"id": "7", "type": "brands"},
        }

    def test_custom_deserializer(self, registry, target):
        seen = []

        def deserializer(item, included):
            seen.append(included)
            return f"{item.type}/{item.id}"

        registry.define("coupon", {"code": ""}, deserializer=deserializer)
        included = [{"id": "9", "type": "brands"}]
        assert target.resource({"id": "1", "type": "coupons"}, included) == "coupons/1"
        assert [r.identity for r in seen[0]] == [("brands", "9")]

    def test_unknown_type(self, target):
        with pytest.raises(UnknownResourceTypeError):
            target.resource({"id": "1", "type": "ghosts"})

    def test_unknown_type_lenient(self, pluralizer, warn):
        from ..deserializer import ResourceGraphDeserializer

        target = ResourceGraphDeserializer(
            ModelRegistry(disable_errors_for_missing_resource_definitions=True),
            pluralizer,
            warn=warn,
        )
        result = target.resource({"id": "1", "type": "ghosts", "attributes": {"boo": 1}})
        assert result == {"id": "1", "type": "ghosts"}
        assert warn.call_count == 1

    def test_malformed(self, target):
        with pytest.raises(DeserializationError):
            target.resource({"id": "1", "attributes": {}})
        with pytest.raises(DeserializationError):
            target.resource({"id": "1", "type": "products"}, [{"id": "1"}])


class TestCycles:
    @pytest.fixture
    def registry(self):
        registry = ModelRegistry()
        registry.define(
            "course",
            {
                "title": "",
                "instructor": has_one("instructors"),
                "lessons": has_many("lessons"),
            },
        )
        registry.define(
            "lesson",
            {
                "title": "",
                "course": has_one("courses"),
                "instructor": has_one("instructors"),
            },
        )
        registry.define("instructor", {"name": "", "lessons": has_many("lessons")})
        registry.define(
            "user",
            {
                "name": "",
                "bestFriend": has_one("users"),
                "friends": has_many("users"),
            },
        )
        return registry

    @pytest.fixture
    def course_document(self):
        def lesson(id, title):
            return {
                "id": id,
                "type": "lessons",
                "attributes": {"title": title},
                "relationships": {
                    "course": {"data": {"id": "1", "type": "courses"}},
                    "instructor": {"data": {"id": "5", "type": "instructors"}},
                },
            }

        return {
            "data": {
                "id": "1",
                "type": "courses",
                "attributes": {"title": "hello"},
                "relationships": {
                    "lessons": {
                        "data": [
                            {"id": "42", "type": "lessons"},
                            {"id": "43", "type": "lessons"},
                        ]
                    },
                    "instructor": {"data": {"id": "5", "type": "instructors"}},
                },
            },
            "included": [
                lesson("42", "sp-one"),
                lesson("43", "sp-two"),
                {
                    "id": "5",
                    "type": "instructors",
                    "attributes": {"name": "instructor one"},
                    "relationships": {
                        "lessons": {
                            "data": [
                                {"id": "42", "type": "lessons"},
                                {"id": "43", "type": "lessons"},
                            ]
                        }
                    },
                },
            ],
        }

    def test_course(self, target, course_document):
        course = target.resource(course_document["data"], course_document["included"])
        assert course["id"] == "1"
        assert course["instructor"]["type"] == "instructors"
        assert len(course["instructor"]["lessons"]) == 2
        assert [lesson["id"] for lesson in course["lessons"]] == ["42", "43"]
        assert [lesson["title"] for lesson in course["lessons"]] == ["sp-one", "sp-two"]
        for lesson in course["lessons"]:
            assert lesson["type"] == "lessons"
            assert lesson["instructor"]["id"] == "5"
            assert lesson["instructor"] is course["instructor"]
            assert lesson["course"] == {"id": "1", "type": "courses"}

    def test_has_one_cycle_reuses_instances(self, target):
        user = target.resource(
            {
                "id": "1",
                "type": "users",
                "relationships": {"bestFriend": {"data": {"id": "2", "type": "users"}}},
            },
            [
                {
                    "id": "2",
                    "type": "users",
                    "attributes": {"name": "two"},
                    "relationships": {"best-friend": {"data": {"id": "3", "type": "users"}}},
                },
                {
                    "id": "3",
                    "type": "users",
                    "attributes": {"name": "three"},
                    "relationships": {"best-friend": {"data": {"id": "2", "type": "users"}}},
                },
            ],
        )
        two = user["bestFriend"]
        three = two["bestFriend"]
        assert two["name"] == "two"
        assert three["name"] == "three"
        assert three["bestFriend"] is two

    def test_has_many_expanded_once(self, target, warn):
        def user(id, friend):
            return {
                "id": id,
                "type": "users",
                "relationships": {"friends": {"data": [{"id": friend, "type": "users"}]}},
            }

        one = target.resource(user("1", "2"), [user("1", "2"), user("2", "1")])
        two = one["friends"][0]
        assert two["id"] == "2"
        assert two["friends"][0]["id"] == "1"
        assert two["friends"][0]["friends"] is None
        warn.assert_called_once_with(
            'Relationship "friends" of "users:1" has already been expanded. '
            "Stopping deserialization."
        )

    def test_fresh_context_per_call(self, target, course_document):
        first = target.resource(course_document["data"], course_document["included"])
        second = target.resource(course_document["data"], course_document["included"])
        assert first is not second
        assert first["instructor"] is not second["instructor"]
        assert second["instructor"]["name"] == "instructor one"
        assert len(second["lessons"]) == 2

    def test_shared_context(self, target, course_document):
        ctx = target.create_context()
        first = target.resource(
            course_document["data"], course_document["included"], context=ctx
        )
        assert ("instructors", "5") in ctx.cache
        assert "courses:1" in ctx.expanded
        second = target.resource(
            course_document["data"], course_document["included"], context=ctx
        )
        assert second["instructor"] is first["instructor"]
        assert second["lessons"] is None
        ctx.clear()
        assert not ctx.cache
        assert not ctx.expanded


class TestCollection:
    def test_collection(self, target):
        document = {
            "data": [
                {
                    "id": "1",
                    "type": "products",
                    "attributes": {"title": "one"},
                    "relationships": {"brand": {"data": {"id": "7", "type": "brands"}}},
                },
                {
                    "id": "2",
                    "type": "products",
                    "attributes": {"title": "two"},
                    "relationships": {"brand": {"data": {"id": "7", "type": "brands"}}},
                },
            ],
            "included": [{"id": "7", "type": "brands", "attributes": {"name": "Acme"}}],
        }
        result = target.collection(document["data"], document["included"])
        assert [p["title"] for p in result] == ["one", "two"]
        assert result[0]["brand"] == {"id": "7", "type": "brands", "name": "Acme"}
        assert result[0]["brand"] is result[1]["brand"]

    def test_empty(self, target):
        assert target.collection([]) == []

    def test_custom_deserializer(self, registry, target):
        registry.define(
            "coupon", {"code": ""}, deserializer=lambda item, included: item["code"].upper()
        )
        result = target.collection(
            [
                {"id": "1", "type": "coupons", "attributes": {"code": "abc"}},
                {"id": "2", "type": "coupons", "attributes": {"code": "def"}},
            ]
        )
        assert result == ["ABC", "DEF"]

    def test_expanded_reset_at_top_level(self, target):
        ctx = target.create_context()
        ctx.expanded.add("products:9")
        target.collection(
            [
                {
                    "id": "1",
                    "type": "products",
                    "relationships": {"tags": {"data": []}},
                }
            ],
            context=ctx,
        )
        assert ctx.expanded == {"products:1"}

        ctx.expanded.add("products:2")
        target.collection([{"id": "3", "type": "products"}], depth=1, context=ctx)
        assert ctx.expanded == {"products:1", "products:2", "products:3"}

    def test_malformed_item(self, target):
        with pytest.raises(DeserializationError) as e:
            target.collection([{"id": "1", "type": "products"}, []])
        assert str(e.value.errors[0].pointer) == "/data/1"
