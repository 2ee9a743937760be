import pytest

from deltapack.core import InvalidSideError, InvalidValueError
from deltapack.diff import ChangeSet, analyze
from deltapack.render import RenderContext, render, resolve_highlight
from deltapack.render.markup import strip_indent


def test_render_without_changes_is_plain_indented_json() -> None:
    markup = render({"a": 1, "b": [True, None], "c": {}}, None, "left")

    assert markup == (
        "{\n"
        '  <span class="json-key">"a"</span>: 1,\n'
        '  <span class="json-key">"b"</span>: [\n'
        "    true,\n"
        "    null\n"
        "  ],\n"
        '  <span class="json-key">"c"</span>: {}\n'
        "}"
    )


def test_render_preserves_value_key_order() -> None:
    markup = render({"z": 1, "a": 2}, None, "right")

    assert markup.index('"z"') < markup.index('"a"')


def test_render_nested_length_change_and_removed_item() -> None:
    left = {"a": [1, 2]}
    result = analyze(left, {"a": [1]})

    assert render(left, result, "left") == (
        "{\n"
        '<span class="diff-changed">  <span class="json-key">"a"</span>: '
        '<span class="diff-changed">[\n'
        "    1,\n"
        '<span class="diff-removed">    <span class="diff-removed">2</span></span>\n'
        "  ]</span></span>\n"
        "}"
    )


def test_changed_path_is_marked_on_both_sides() -> None:
    changes = ChangeSet(changed=frozenset({"a"}))

    for side in ("left", "right"):
        markup = render({"a": 1}, changes, side)
        assert '<span class="diff-changed"><span class="json-key">' not in markup
        assert '<span class="diff-changed">  <span class="json-key">"a"</span>' in markup
        assert '<span class="diff-changed">1</span>' in markup


def test_removed_path_is_marked_only_on_left() -> None:
    changes = ChangeSet(removed=frozenset({"a"}))

    assert "diff-removed" in render({"a": 1}, changes, "left")
    assert "diff-" not in render({"a": 1}, changes, "right")


def test_added_path_is_marked_only_on_right() -> None:
    changes = ChangeSet(added=frozenset({"a"}))

    assert "diff-added" in render({"a": 1}, changes, "right")
    assert "diff-" not in render({"a": 1}, changes, "left")


def test_end_to_end_renderings() -> None:
    left = {"id": 1, "name": "X"}
    right = {"id": 1, "name": "Y", "extra": True}
    result = analyze(left, right)

    left_markup = render(left, result, "left")
    right_markup = render(right, result, "right")

    assert '<span class="diff-changed">&quot;X&quot;</span>' in left_markup
    assert "extra" not in left_markup
    assert "diff-added" not in left_markup
    assert '<span class="diff-changed">&quot;Y&quot;</span>' in right_markup
    assert '<span class="diff-added">true</span>' in right_markup
    assert '<span class="json-key">"id"</span>: 1,' in right_markup


def test_root_array_marker_highlights_root() -> None:
    right = [1, 2, 3]
    result = analyze([1, 2], right)

    markup = render(right, result, "right")

    assert markup.startswith('<span class="diff-changed">[\n')
    assert markup.endswith("]</span>")
    assert '<span class="diff-added">  <span class="diff-added">3</span></span>' in markup


def test_empty_containers_receive_their_own_highlight() -> None:
    changes = ChangeSet(changed=frozenset({"a", "b"}))

    markup = render({"a": {}, "b": []}, changes, "left")

    assert '<span class="diff-changed">{}</span>' in markup
    assert '<span class="diff-changed">[]</span>' in markup


def test_root_scalar_and_null_render() -> None:
    assert render(None, None, "left") == "null"
    assert render("x", ChangeSet(changed=frozenset({""})), "left") == (
        '<span class="diff-changed">&quot;x&quot;</span>'
    )


def test_scalars_and_keys_are_escaped() -> None:
    markup = render({"<k>": "a & <b> 'c'"}, None, "left")

    assert '<span class="json-key">"&lt;k&gt;"</span>' in markup
    assert "&quot;a &amp; &lt;b&gt; &#x27;c&#x27;&quot;" in markup
    assert "<b>" not in markup


def test_keys_with_quotes_are_json_escaped() -> None:
    markup = render({'say "hi"': 1}, None, "left")

    assert '<span class="json-key">"say \\&quot;hi\\&quot;"</span>' in markup


def test_resolve_highlight_root_equivalence() -> None:
    changes = ChangeSet(changed=frozenset({"[]"}))
    context = RenderContext(side="left", changes=changes)

    assert resolve_highlight("", context) == "changed"
    assert resolve_highlight("[]", context) == "changed"
    assert resolve_highlight("[0]", context) is None


def test_changed_wins_over_added_and_removed() -> None:
    changes = ChangeSet(
        changed=frozenset({"a"}),
        added=frozenset({"a"}),
        removed=frozenset({"a"}),
    )

    for side in ("left", "right"):
        context = RenderContext(side=side, changes=changes)
        assert resolve_highlight("a", context) == "changed"


def test_strip_indent_keeps_wrapper_opening_tag() -> None:
    assert strip_indent("    1") == "1"
    assert strip_indent('<span class="diff-added">    1</span>') == (
        '<span class="diff-added">1</span>'
    )
    assert strip_indent('  <span class="diff-added">  1</span>') == (
        '<span class="diff-added">1</span>'
    )


def test_render_accepts_change_set_directly() -> None:
    result = analyze({"a": 1}, {"a": 2})

    assert render({"a": 1}, result, "left") == render({"a": 1}, result.changes, "left")


def test_render_rejects_unknown_side() -> None:
    with pytest.raises(InvalidSideError, match="side must be 'left' or 'right'"):
        render({}, None, "middle")


def test_render_rejects_invalid_values() -> None:
    with pytest.raises(InvalidValueError):
        render({"a": float("inf")}, None, "left")
