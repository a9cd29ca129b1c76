"""Tests for error codes and compact diagnostics."""

from __future__ import annotations

import pytest

from tagscope import (
    DuplicateVariableNameError,
    ErrorCode,
    InvalidDescriptorError,
    TagInvocation,
    TagScopeError,
    UnscopedVariableError,
    VariableScope,
)
from tagscope import terminal


@pytest.fixture(autouse=True)
def _plain_output(monkeypatch):
    monkeypatch.setattr(terminal, "_USE_COLORS", False)


class TestErrorCode:
    @pytest.mark.parametrize(
        ("code", "category"),
        [
            (ErrorCode.INVALID_DESCRIPTOR, "descriptor"),
            (ErrorCode.INVALID_DECLARATION, "descriptor"),
            (ErrorCode.DUPLICATE_VARIABLE, "scope"),
            (ErrorCode.UNSCOPED_VARIABLE, "internal"),
        ],
    )
    def test_category(self, code, category):
        assert code.category == category

    def test_docs_url_anchor(self):
        assert ErrorCode.DUPLICATE_VARIABLE.docs_url.endswith("#t-sco-001")

    def test_codes_unique(self):
        values = [c.value for c in ErrorCode]
        assert len(values) == len(set(values))


class TestHierarchy:
    @pytest.mark.parametrize(
        "exc_type",
        [InvalidDescriptorError, DuplicateVariableNameError, UnscopedVariableError],
    )
    def test_all_derive_from_base(self, exc_type):
        assert issubclass(exc_type, TagScopeError)


class TestMessages:
    def test_invalid_descriptor_message(self):
        err = InvalidDescriptorError("name", "1x", "must be a valid identifier")
        assert str(err) == "Invalid name '1x': must be a valid identifier"
        assert err.code is ErrorCode.INVALID_DESCRIPTOR

    def test_duplicate_message_with_location(self):
        invocation = TagInvocation("c:forEach", template_name="list.jsp", lineno=12)
        err = DuplicateVariableNameError(
            "item", [VariableScope.AT_BEGIN, VariableScope.NESTED], invocation=invocation
        )
        assert str(err) == (
            "Duplicate scripting variable 'item' (AT_BEGIN, NESTED) "
            "in <c:forEach> at list.jsp:12"
        )

    def test_unscoped_message(self):
        err = UnscopedVariableError(object())
        assert "no valid scope" in str(err)

    def test_format_compact(self):
        invocation = TagInvocation("x:loop", template_name="page.jsp", lineno=3, col_offset=0)
        err = DuplicateVariableNameError(
            "i", [VariableScope.AT_BEGIN, VariableScope.AT_END], invocation=invocation
        )
        text = err.format_compact()
        lines = text.splitlines()
        assert lines[0] == "T-SCO-001: Duplicate scripting variable 'i' (AT_BEGIN, AT_END)"
        assert "  Location: <x:loop> at page.jsp:3:0" in lines
        assert any(line.startswith("  Hint: Rename") for line in lines)
        assert lines[-1].endswith("#t-sco-001")

    def test_format_compact_without_invocation(self):
        text = UnscopedVariableError(object()).format_compact()
        assert "Location" not in text
        assert text.startswith("T-INT-001: ")


class TestTagInvocation:
    def test_location_variants(self):
        assert TagInvocation("t").location == "<template>"
        assert TagInvocation("t", template_name="a.jsp").location == "a.jsp"
        assert TagInvocation("t", template_name="a.jsp", lineno=4).location == "a.jsp:4"
        assert TagInvocation("t", "a.jsp", 4, 2).location == "a.jsp:4:2"
