"""Tests for scrutinizer.merge."""

from __future__ import annotations

from scrutinizer.merge import deep_merge


def test_later_scalar_wins() -> None:
    target = {"license": "MIT", "stars": 1}
    deep_merge(target, {"stars": 5})

    assert target == {"license": "MIT", "stars": 5}


def test_mappings_merge_key_by_key() -> None:
    target = {"openIssues": {"count": 3, "latest": []}}
    deep_merge(target, {"openIssues": {"count": 4}, "version": "1.0.0"})

    assert target == {"openIssues": {"count": 4, "latest": []}, "version": "1.0.0"}


def test_sequences_merge_by_index_and_keep_trailing_elements() -> None:
    target = {"items": [{"a": 1}, {"a": 2}, {"a": 3}]}
    deep_merge(target, {"items": [{"b": 9}]})

    assert target == {"items": [{"a": 1, "b": 9}, {"a": 2}, {"a": 3}]}


def test_longer_sequence_extends_existing_one() -> None:
    target = {"items": ["x"]}
    deep_merge(target, {"items": ["y", "z"]})

    assert target == {"items": ["y", "z"]}


def test_empty_sequence_leaves_existing_sequence_untouched() -> None:
    target = {"changelog": [{"version": "1.0.0"}]}
    deep_merge(target, {"changelog": []})

    assert target == {"changelog": [{"version": "1.0.0"}]}


def test_type_mismatch_replaces_value() -> None:
    target = {"changelog": ["entry"], "docs": "text"}
    deep_merge(target, {"changelog": "# Changelog", "docs": {"filename": "a.md"}})

    assert target == {"changelog": "# Changelog", "docs": {"filename": "a.md"}}


def test_none_overrides_existing_value() -> None:
    target = {"homepage": "https://example.com"}
    deep_merge(target, {"homepage": None})

    assert target == {"homepage": None}


def test_merge_copies_source_values() -> None:
    partial = {"contributors": [{"username": "jane"}], "meta": {"topics": ["a"]}}
    target: dict = {}
    deep_merge(target, partial)

    partial["contributors"][0]["username"] = "changed"
    partial["meta"]["topics"].append("b")

    assert target == {"contributors": [{"username": "jane"}], "meta": {"topics": ["a"]}}


def test_tuples_are_merged_as_lists() -> None:
    target: dict = {}
    deep_merge(target, {"dependencies": ("pyyaml", "fastapi")})

    assert target == {"dependencies": ["pyyaml", "fastapi"]}


def test_returns_target_object() -> None:
    target: dict = {}
    assert deep_merge(target, {"a": 1}) is target


def test_merge_is_order_sensitive() -> None:
    partials = [{"name": "first", "tags": ["a", "b"]}, {"name": "second", "tags": ["c"]}]

    forward: dict = {}
    for partial in partials:
        deep_merge(forward, partial)
    backward: dict = {}
    for partial in reversed(partials):
        deep_merge(backward, partial)

    assert forward == {"name": "second", "tags": ["c", "b"]}
    assert backward == {"name": "first", "tags": ["a", "b"]}
