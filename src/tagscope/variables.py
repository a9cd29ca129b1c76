"""Scripting variable descriptors.

A custom tag may introduce named variables into the code generated for the
template that uses it. Each variable is described once per tag invocation by
a VariableDescriptor: its name, its declared type, whether it needs a fresh
declaration, and its scope window relative to the tag's start and end markers.

Scope windows::

    <prefix:tag>    ...body...    </prefix:tag>    ...rest of scope...
    |<-------------- AT_BEGIN ---------------------------------------->|
    |<------- NESTED ------->|
                                              |<------- AT_END ------->|

Type names:
    ``type_name`` may be fully qualified (``java.lang.Integer``) or short
    (``Integer``); a short name is resolved against the template's import
    directives by the code emission stage. Values reach these variables
    through attribute storage that cannot hold primitives, so the type must
    be a boxed/reference type. Neither rule is checked here: this package has
    no view of the target type system.

"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any

from tagscope.exceptions import InvalidDescriptorError


class VariableScope(IntEnum):
    """Visibility window of a scripting variable.

    Integer values match the constants tag-library metadata uses on the wire.
    """

    NESTED = 0
    """Visible only between the start and end markers."""

    AT_BEGIN = 1
    """Visible from the start marker to the end of the enclosing scope."""

    AT_END = 2
    """Visible from the end marker to the end of the enclosing scope."""

    @property
    def visible_in_body(self) -> bool:
        """True if the variable can be read inside the tag body."""
        return self is not VariableScope.AT_END

    @property
    def visible_after_end(self) -> bool:
        """True if the variable can be read after the end marker."""
        return self is not VariableScope.NESTED

    def overlaps(self, other: VariableScope) -> bool:
        """True if both windows share a region of generated code."""
        return (self.visible_in_body and other.visible_in_body) or (
            self.visible_after_end and other.visible_after_end
        )

    @classmethod
    def coerce(cls, value: Any) -> VariableScope:
        """Convert a scope, its wire integer, or its name to a VariableScope.

        Raises:
            InvalidDescriptorError: If value names no known scope.
        """
        if isinstance(value, cls):
            return value
        # bool is an int subclass; True/False are never scopes
        if isinstance(value, int) and not isinstance(value, bool):
            try:
                return cls(value)
            except ValueError:
                pass
        elif isinstance(value, str):
            member = cls.__members__.get(value.strip().upper())
            if member is not None:
                return member
        raise InvalidDescriptorError(
            "scope", value, "expected one of NESTED, AT_BEGIN, AT_END"
        )


@dataclass(frozen=True, slots=True)
class VariableDescriptor:
    """One scripting variable contributed by a tag invocation.

    Immutable and hashable, so descriptors can be collected into sets and
    used as memoization keys.

    Attributes:
        name: Variable name; unique among the tag's variables whose
            windows overlap.
        type_name: Declared type, fully qualified or short.
        declare: True if the invocation introduces a new binding that needs
            a declaration in generated code; False if it updates a variable
            declared by an enclosing or earlier construct.
        scope: Visibility window.

    Raises:
        InvalidDescriptorError: On an empty or non-identifier name, an
            empty type name, a non-bool declare flag, or an unknown scope.

    Example:
        >>> VariableDescriptor("row", "java.lang.Integer", scope=VariableScope.AT_BEGIN)
        VariableDescriptor(name='row', type_name='java.lang.Integer', declare=True, scope=<VariableScope.AT_BEGIN: 1>)
    """

    name: str
    type_name: str
    declare: bool = True
    scope: VariableScope = VariableScope.NESTED

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name:
            raise InvalidDescriptorError("name", self.name, "must be a non-empty string")
        # Java identifiers also allow "$"
        if not self.name.replace("$", "_").isidentifier():
            raise InvalidDescriptorError("name", self.name, "must be a valid identifier")
        if not isinstance(self.type_name, str) or not self.type_name.strip():
            raise InvalidDescriptorError(
                "type_name", self.type_name, "must be a non-empty string"
            )
        if not isinstance(self.declare, bool):
            raise InvalidDescriptorError("declare", self.declare, "must be a bool")
        # Frozen dataclass: normalize through object.__setattr__
        object.__setattr__(self, "scope", VariableScope.coerce(self.scope))

    @property
    def is_qualified(self) -> bool:
        """True for a fully qualified type name (``java.util.Map``)."""
        return "." in self.type_name

    @property
    def short_type_name(self) -> str:
        """Last dotted component of the type name."""
        return self.type_name.rsplit(".", 1)[-1]

    def overlaps(self, other: VariableDescriptor) -> bool:
        """True if both descriptors bind the same name in overlapping windows."""
        return self.name == other.name and self.scope.overlaps(other.scope)
