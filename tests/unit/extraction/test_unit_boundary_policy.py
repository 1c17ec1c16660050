# tests/unit/extraction/test_unit_boundary_policy.py — v1
"""Tests for extraction/boundary_policy.py — policy tables and registry."""

from __future__ import annotations

import pytest

from defview.extraction.boundary_policy import (
    DEFAULT_POLICY,
    BoundaryPolicy,
    policy_for_language,
    register_policy,
    unregister_policy,
)


@pytest.fixture
def registered():
    yield
    unregister_policy("lisp")


class TestBoundaryPolicy:
    def test_default_tables(self):
        assert DEFAULT_POLICY.leading_prefixes == frozenset("@/#[;-")
        assert DEFAULT_POLICY.block_last_chars == frozenset(":{;}")
        assert DEFAULT_POLICY.bodyless_terminators == frozenset({";"})

    def test_with_overrides_returns_copy(self):
        policy = DEFAULT_POLICY.with_overrides(leading_prefixes=["#"])
        assert policy.leading_prefixes == frozenset({"#"})
        assert policy.block_last_chars == DEFAULT_POLICY.block_last_chars
        assert DEFAULT_POLICY.leading_prefixes == frozenset("@/#[;-")

    def test_with_no_overrides(self):
        assert DEFAULT_POLICY.with_overrides() == DEFAULT_POLICY


class TestRegistry:
    def test_unknown_language_uses_default(self):
        assert policy_for_language("cobol") is DEFAULT_POLICY

    def test_none_language_uses_given_default(self):
        custom = BoundaryPolicy(leading_prefixes=frozenset({";"}))
        assert policy_for_language(None, default=custom) is custom

    def test_register_and_lookup(self, registered):
        lisp = BoundaryPolicy(leading_prefixes=frozenset({";"}))
        register_policy("lisp", lisp)
        assert policy_for_language("lisp") is lisp

    def test_register_replaces(self, registered):
        register_policy("lisp", BoundaryPolicy())
        replacement = BoundaryPolicy(leading_prefixes=frozenset({";"}))
        register_policy("lisp", replacement)
        assert policy_for_language("lisp") is replacement

    def test_unregister(self):
        register_policy("lisp", BoundaryPolicy(leading_prefixes=frozenset({";"})))
        unregister_policy("lisp")
        assert policy_for_language("lisp") is DEFAULT_POLICY
