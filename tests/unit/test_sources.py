from __future__ import annotations

import pytest

from lib_effective_config.application import ports
from lib_effective_config.domain.sources import CompositeSource, LookupSource, MapSource


def test_map_source_is_enumerable_and_origin_aware() -> None:
    source = MapSource("defaults", {"a": 1, "b": None}, {"a": "app.toml:3"})
    assert isinstance(source, ports.EnumerableSource)
    assert isinstance(source, ports.OriginLookup)
    assert source.property_names() == ("a", "b")
    assert source.contains_property("b")
    assert source.get_property("b") is None
    assert source.get_origin("a") == "app.toml:3"
    assert source.get_origin("b") is None


def test_map_source_copies_input() -> None:
    backing = {"a": 1}
    source = MapSource("defaults", backing)
    backing["a"] = 2
    assert source.get_property("a") == 1
    with pytest.raises(TypeError):
        source.properties["a"] = 3  # type: ignore[index]


def test_composite_source_walks_children_in_order() -> None:
    group = CompositeSource("group", [MapSource("a", {"x": 1}), MapSource("b", {"x": 2, "y": 3})])
    assert isinstance(group, ports.CompositeLike)
    assert group.contains_property("y")
    assert not group.contains_property("z")
    assert group.get_property("x") == 1
    assert group.get_property("z") is None
    assert group.property_names() == ("x", "y")


def test_lookup_source_is_not_enumerable() -> None:
    source = LookupSource("random", lambda key: "4" if key == "dice" else None)
    assert isinstance(source, ports.PropertySource)
    assert not isinstance(source, ports.EnumerableSource)
    assert source.contains_property("dice")
    assert source.get_property("other") is None
