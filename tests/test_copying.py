"""
test_copying.py

Copies and unvalidated construction keep the resolver's guarantees.

Tests prove:
- model_copy(update=...) and model_construct() route declared properties
  through their setters (no same-named dynamic entry)
- every copy gets its own subscriber list
"""

import copy

import pytest

from models import Car, TestObject


# =============================================================================
# SECTION 1: Routing of declared properties
# =============================================================================

class TestCopyRouting:

    def test_model_copy_update_declared_property(self):
        copied = Car(Name="A").model_copy(update={"Name": "B", "wheels": 4})

        assert copied.Name == "B"
        assert copied.get_properties() == ["Name", "wheels"]
        assert copied.dynamic_properties == {"wheels": 4}

    def test_model_copy_update_field(self):
        copied = TestObject(Name="A").model_copy(update={"Name": "B"})

        assert copied.Name == "B"
        assert copied.get_properties() == ["Name"]

    def test_model_copy_leaves_original_alone(self):
        original = Car(Name="A")
        original.model_copy(update={"Name": "B"})

        assert original.Name == "A"

    def test_model_construct_declared_property(self):
        car = Car.model_construct(Name="A", colour="red")

        assert car.Name == "A"
        assert car.get_properties() == ["Name", "colour"]
        assert car.model_dump() == {"Name": "A", "colour": "red"}

    def test_model_construct_field(self):
        obj = TestObject.model_construct(Name="A")

        assert obj.Name == "A"
        assert obj.get_properties() == ["Name"]


# =============================================================================
# SECTION 2: Subscriber isolation
# =============================================================================

@pytest.mark.parametrize(
    "make_copy",
    [
        lambda obj: obj.model_copy(),
        lambda obj: obj.model_copy(deep=True),
        copy.copy,
        copy.deepcopy,
    ],
    ids=["model_copy", "model_copy_deep", "copy", "deepcopy"],
)
class TestCopySubscribers:

    def test_copy_changes_do_not_reach_original_subscribers(self, make_copy, recorder):
        original = Car(Name="A")
        original.subscribe(recorder)
        clone = make_copy(original)
        clone["x"] = 1
        clone.Name = "B"

        assert recorder.names == []

    def test_subscribing_on_copy_leaves_original_silent(self, make_copy, recorder):
        original = Car(Name="A")
        clone = make_copy(original)
        clone.subscribe(recorder)
        original["x"] = 1

        assert recorder.names == []

    def test_copy_keeps_content(self, make_copy):
        original = Car(Name="A")
        original["x"] = [1, 2]
        clone = make_copy(original)

        assert clone == original
        clone["y"] = 2
        assert "y" not in original
