"""Exceptions for tagscope.

Exception Hierarchy:
TagScopeError (base)
├── InvalidDescriptorError       # Malformed name/type/scope at construction
├── DuplicateVariableNameError   # Two variables collide in overlapping scopes
└── UnscopedVariableError        # Internal consistency fault (unreachable)

All of these are translation-time errors. They are raised synchronously by
the call that detects them and are never retried: every computation here is
pure, so a retry cannot change the outcome.

Example:
    ```
    T-SCO-001: Duplicate scripting variable 'item' (AT_BEGIN, NESTED)
      Location: <c:forEach> at list.jsp:12
      Hint: Rename one of the variables, or give them disjoint scopes
      Docs: https://tagscope.readthedocs.io/en/latest/errors.html#t-sco-001
    ```

"""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum
from typing import TYPE_CHECKING, Any

from tagscope import terminal

if TYPE_CHECKING:
    from tagscope.invocation import TagInvocation
    from tagscope.variables import VariableDescriptor, VariableScope

# ---------------------------------------------------------------------------
# Error codes
# ---------------------------------------------------------------------------

_DOCS_BASE = "https://tagscope.readthedocs.io/en/latest/errors.html"


class ErrorCode(Enum):
    """Searchable error codes.

    Format: T-{CATEGORY}-{NUMBER}
    Categories: VAR (variable descriptors), SCO (scope resolution),
    INT (internal consistency)
    """

    # Descriptor errors (T-VAR-xxx)
    INVALID_DESCRIPTOR = "T-VAR-001"
    INVALID_DECLARATION = "T-VAR-002"

    # Scope resolution errors (T-SCO-xxx)
    DUPLICATE_VARIABLE = "T-SCO-001"

    # Internal faults (T-INT-xxx)
    UNSCOPED_VARIABLE = "T-INT-001"

    @property
    def docs_url(self) -> str:
        """Documentation URL for this error code."""
        return f"{_DOCS_BASE}#{self.value.lower()}"

    @property
    def category(self) -> str:
        """Error category ('descriptor', 'scope', 'internal')."""
        prefix = self.value.split("-")[1]
        return {
            "VAR": "descriptor",
            "SCO": "scope",
            "INT": "internal",
        }.get(prefix, "unknown")


class TagScopeError(Exception):
    """Base exception for all tagscope errors.

    Attributes:
        code: ErrorCode identifying the failure.
        invocation: Tag invocation the error is attributed to, if known.
        hint: Optional actionable suggestion.
    """

    code: ErrorCode | None = None

    def __init__(
        self,
        message: str,
        *,
        invocation: TagInvocation | None = None,
        hint: str | None = None,
    ):
        self.message = message
        self.invocation = invocation
        self.hint = hint
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.invocation is not None:
            return f"{self.message} in {self.invocation}"
        return self.message

    def format_compact(self) -> str:
        """Format the error as a terminal diagnostic without traceback noise.

        Format::

            T-SCO-001: Duplicate scripting variable 'item' (AT_BEGIN, NESTED)
              Location: <c:forEach> at list.jsp:12
              Hint: Rename one of the variables, or give them disjoint scopes
              Docs: https://tagscope.readthedocs.io/en/latest/errors.html#t-sco-001
        """
        parts = [
            terminal.format_error_header(
                self.code.value if self.code else None, self.message
            )
        ]
        if self.invocation is not None:
            parts.append(f"  Location: {terminal.location(str(self.invocation))}")
        if self.hint:
            parts.append(f"  {terminal.hint('Hint:')} {self.hint}")
        if self.code:
            parts.append(
                f"  {terminal.dim_text('Docs:')} {terminal.docs_url(self.code.docs_url)}"
            )
        return "\n".join(parts)


class InvalidDescriptorError(TagScopeError, ValueError):
    """A variable descriptor or ``<variable>`` declaration is malformed.

    Raised at construction time for an empty or non-identifier name, an empty
    type name, or a scope outside NESTED/AT_BEGIN/AT_END. This is a metadata
    error in the tag library and cannot be recovered locally.

    Attributes:
        field: Name of the offending field (``"name"``, ``"type_name"``, ...).
        value: The rejected value.
    """

    code: ErrorCode | None = ErrorCode.INVALID_DESCRIPTOR

    def __init__(
        self,
        field: str,
        value: Any,
        reason: str,
        *,
        code: ErrorCode | None = None,
        **kwargs: Any,
    ):
        self.field = field
        self.value = value
        if code is not None:
            self.code = code
        super().__init__(f"Invalid {field} {value!r}: {reason}", **kwargs)


class DuplicateVariableNameError(TagScopeError):
    """Two scripting variables of one tag share a name in overlapping scopes.

    A tag-library authoring error. NESTED and AT_END windows never overlap,
    so that pair may share a name; every other pairing collides.

    Attributes:
        name: The colliding variable name.
        scopes: Scopes of the colliding variables, in declaration order.
    """

    code: ErrorCode | None = ErrorCode.DUPLICATE_VARIABLE

    def __init__(
        self,
        name: str,
        scopes: Iterable[VariableScope | str],
        **kwargs: Any,
    ):
        self.name = name
        self.scopes = tuple(scopes)
        labels = ", ".join(getattr(s, "name", str(s)) for s in self.scopes)
        kwargs.setdefault(
            "hint", "Rename one of the variables, or give them disjoint scopes"
        )
        super().__init__(
            f"Duplicate scripting variable '{name}' ({labels})",
            **kwargs,
        )


class UnscopedVariableError(TagScopeError):
    """A descriptor reached scope resolution without a valid scope.

    Descriptor validation makes this unreachable in normal operation; seeing
    it means something bypassed construction. Treat as fatal.

    Attributes:
        descriptor: The offending object.
    """

    code: ErrorCode | None = ErrorCode.UNSCOPED_VARIABLE

    def __init__(self, descriptor: VariableDescriptor | Any, **kwargs: Any):
        self.descriptor = descriptor
        scope = getattr(descriptor, "scope", None)
        name = getattr(descriptor, "name", None)
        super().__init__(
            f"Variable {name!r} has no valid scope (got {scope!r})",
            **kwargs,
        )
