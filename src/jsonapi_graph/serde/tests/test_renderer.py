import datetime
import decimal
import uuid

import pytest


@pytest.fixture
def target_class():
    from ..renderer import ReprRenderer

    return ReprRenderer


def test_resource(target_class):
    from ..models import (
        LinkageRepr,
        ResourceIdRepr,
        ResourceRepr,
    )

    target = target_class()

    result = target(
        ResourceRepr(
            type="foos",
            id="1",
            attributes=[
                ("a", 1),
                ("b", 2),
                ("c", 3),
            ],
            relationships=[
                (
                    "item",
                    LinkageRepr(
                        links={"related": "/bars/1"},
                        data=ResourceIdRepr(
                            type="bars",
                            id="1",
                        ),
                    ),
                ),
                (
                    "items",
                    LinkageRepr(
                        data=[
                            ResourceIdRepr(type="bars", id="1"),
                            ResourceIdRepr(type="bars", id="2", meta={"primary": True}),
                        ],
                    ),
                ),
                (
                    "none",
                    LinkageRepr(data=None),
                ),
            ],
            meta={"x": "y"},
            links={"self": "/foos/1"},
        ),
    )

    assert result == {
        "type": "foos",
        "id": "1",
        "attributes": {
            "a": 1,
            "b": 2,
            "c": 3,
        },
        "relationships": {
            "item": {
                "links": {"related": "/bars/1"},
                "data": {"type": "bars", "id": "1"},
            },
            "items": {
                "data": [
                    {"type": "bars", "id": "1"},
                    {"type": "bars", "id": "2", "meta": {"primary": True}},
                ],
            },
            "none": {"data": None},
        },
        "meta": {"x": "y"},
        "links": {"self": "/foos/1"},
    }


def test_minimal_resource(target_class):
    from ..models import ResourceRepr

    assert target_class()(ResourceRepr(type="foos", id=None)) == {"type": "foos"}


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (
            datetime.datetime(
                2020, 1, 1, 9, 0, 0, tzinfo=datetime.timezone(datetime.timedelta(hours=9))
            ),
            "2020-01-01T00:00:00+00:00",
        ),
        (datetime.date(2020, 1, 2), "2020-01-02"),
        (decimal.Decimal("1.50"), "1.50"),
        (b"abc", "YWJj"),
        ({"nested": [decimal.Decimal("2"), None]}, {"nested": ["2", None]}),
        (("a", "b"), ["a", "b"]),
    ],
)
def test_scalars(target_class, value, expected):
    from ..models import ResourceRepr

    result = target_class()(ResourceRepr(type="foos", id="1", attributes=[("v", value)]))
    assert result["attributes"]["v"] == expected


def test_naive_datetime(target_class):
    from ..models import ResourceRepr

    repr_ = ResourceRepr(
        type="foos", id="1", attributes=[("at", datetime.datetime(2020, 1, 1, 0, 0, 0))]
    )
    with pytest.raises(ValueError, match="/data/attributes/at: naive datetime"):
        target_class()(repr_)

    result = target_class(
        assume_naive_timezone_as=datetime.timezone(datetime.timedelta(hours=-5))
    )(repr_)
    assert result["attributes"]["at"] == "2020-01-01T05:00:00+00:00"


def test_decimal_as_float(target_class):
    from ..models import ResourceRepr

    result = target_class(render_decimal_as_str=False)(
        ResourceRepr(type="foos", id="1", attributes=[("price", decimal.Decimal("1.5"))])
    )
    assert result["attributes"]["price"] == 1.5


def test_other_scalars_passed_through(target_class):
    from ..models import ResourceRepr

    ref = uuid.UUID("12345678-1234-5678-1234-567812345678")
    marker = object()
    result = target_class()(
        ResourceRepr(type="foos", id="1", attributes=[("ref", ref), ("v", {"nested": [marker]})])
    )
    assert result["attributes"]["ref"] is ref
    assert result["attributes"]["v"]["nested"][0] is marker
