import pytest

from nightcore.graph.factory import ElementFactory, ElementUnavailable, GraphConstructionError


def test_create_returns_backend_element(backend) -> None:
    element = ElementFactory(backend).create("audioconvert", "convert1")

    assert element.type_name == "audioconvert"
    assert element.label == "convert1"


def test_missing_type_raises_with_type_name(backend) -> None:
    backend.missing.add("pitch")

    with pytest.raises(ElementUnavailable) as excinfo:
        ElementFactory(backend).create("pitch", "pitch")

    assert excinfo.value.type_name == "pitch"
    assert "'pitch'" in str(excinfo.value)
    assert isinstance(excinfo.value, GraphConstructionError)
