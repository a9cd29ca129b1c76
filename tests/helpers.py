"""Small builders shared by tagscope tests."""

from __future__ import annotations

from collections.abc import Iterable

from tagscope import VariableDescriptor, VariableScope


def var(
    name: str,
    scope: VariableScope = VariableScope.NESTED,
    *,
    declare: bool = True,
    type_name: str = "java.lang.String",
) -> VariableDescriptor:
    """Shorthand for a VariableDescriptor."""
    return VariableDescriptor(name=name, type_name=type_name, declare=declare, scope=scope)


def names(descriptors: Iterable[VariableDescriptor]) -> set[str]:
    return {d.name for d in descriptors}
