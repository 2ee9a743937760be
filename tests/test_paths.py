from deltapack.core import ROOT, JsonPath, is_root_designator
from deltapack.diff import ChangeSet


def test_path_string_form() -> None:
    assert str(ROOT) == ""
    assert str(ROOT.child_key("a")) == "a"
    assert str(ROOT.child_key("a").child_key("b")) == "a.b"
    assert str(ROOT.child_key("a").child_index(0).child_key("b")) == "a[0].b"
    assert str(ROOT.child_index(2).child_index(0)) == "[2][0]"


def test_path_is_hashable_value_type() -> None:
    assert JsonPath(("a", 0)) == ROOT.child_key("a").child_index(0)
    assert len({JsonPath(("a",)), JsonPath(("a",))}) == 1
    assert ROOT.is_root is True
    assert ROOT.child_index(0).is_root is False


def test_root_designators() -> None:
    assert is_root_designator("") is True
    assert is_root_designator("[]") is True
    assert is_root_designator("[0]") is False


def test_change_set_contains_honors_root_equivalence() -> None:
    changes = ChangeSet(changed=frozenset({""}), removed=frozenset({"a"}))

    assert changes.contains("changed", "[]") is True
    assert changes.contains("changed", "") is True
    assert changes.contains("removed", "a") is True
    assert changes.contains("added", "a") is False


def test_change_set_round_trips_through_dict() -> None:
    changes = ChangeSet(changed=frozenset({"b", "a"}), added=frozenset({"[1]"}))

    assert ChangeSet.from_dict(changes.to_dict()) == changes
    assert changes.counts() == {"changed": 2, "added": 1, "removed": 0}
