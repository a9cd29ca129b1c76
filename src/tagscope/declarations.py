"""Descriptors from tag-library ``<variable>`` declarations.

Most tags declare their scripting variables statically in the tag library
descriptor instead of computing them in an extra-info provider::

    <variable>
      <name-from-attribute>var</name-from-attribute>
      <variable-class>java.lang.Integer</variable-class>
      <declare>true</declare>
      <scope>AT_BEGIN</scope>
    </variable>

The metadata loader hands each element over as a mapping keyed by the
sub-element names. This module applies the descriptor defaults and resolves
``name-from-attribute`` against the attributes of the tag invocation.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from tagscope.exceptions import ErrorCode, InvalidDescriptorError
from tagscope.variables import VariableDescriptor, VariableScope

DEFAULT_VARIABLE_CLASS = "java.lang.String"

_TRUE = frozenset({"true", "yes", "1"})
_FALSE = frozenset({"false", "no", "0"})


def _parse_declare(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise InvalidDescriptorError(
        "declare", value, "expected true or false", code=ErrorCode.INVALID_DECLARATION
    )


def _resolve_name(
    declaration: Mapping[str, Any], attributes: Mapping[str, str] | None
) -> str:
    given = declaration.get("name-given")
    from_attribute = declaration.get("name-from-attribute")

    if given is not None and from_attribute is not None:
        raise InvalidDescriptorError(
            "name",
            given,
            "name-given and name-from-attribute are mutually exclusive",
            code=ErrorCode.INVALID_DECLARATION,
        )
    if given is not None:
        return given
    if from_attribute is None:
        raise InvalidDescriptorError(
            "name",
            None,
            "one of name-given or name-from-attribute is required",
            code=ErrorCode.INVALID_DECLARATION,
        )

    # The attribute value must be known at translation time
    value = (attributes or {}).get(from_attribute)
    if value is None:
        raise InvalidDescriptorError(
            "name-from-attribute",
            from_attribute,
            "attribute is not set on this tag invocation",
            code=ErrorCode.INVALID_DECLARATION,
        )
    return value


def descriptor_from_declaration(
    declaration: Mapping[str, Any],
    attributes: Mapping[str, str] | None = None,
) -> VariableDescriptor:
    """Build a VariableDescriptor from one ``<variable>`` declaration.

    Defaults: ``variable-class`` is java.lang.String, ``declare`` is true,
    ``scope`` is NESTED.

    Args:
        declaration: Sub-element name to text (or already-typed value).
        attributes: Translation-time attribute values of the invocation,
            used to resolve ``name-from-attribute``.

    Raises:
        InvalidDescriptorError: On a missing or conflicting name source, an
            unparsable ``declare``, or any descriptor validation failure.
    """
    name = _resolve_name(declaration, attributes)
    type_name = declaration.get("variable-class") or DEFAULT_VARIABLE_CLASS
    declare = _parse_declare(declaration.get("declare"))
    scope = declaration.get("scope")
    scope = VariableScope.NESTED if scope is None else VariableScope.coerce(scope)
    return VariableDescriptor(name=name, type_name=type_name, declare=declare, scope=scope)


def descriptors_from_declarations(
    declarations: Iterable[Mapping[str, Any]],
    attributes: Mapping[str, str] | None = None,
) -> tuple[VariableDescriptor, ...]:
    """Build descriptors for every ``<variable>`` element of a tag."""
    return tuple(descriptor_from_declaration(d, attributes) for d in declarations)
