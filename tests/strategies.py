"""Shared hypothesis strategies for tagscope property-based testing.

Builds structurally valid inputs for scope resolution:

- **Descriptors**: single VariableDescriptor values over every scope
- **Descriptor sets**: variable sets of one tag invocation whose names never
  collide in overlapping scopes
- **Traces**: runtime lifecycle traces for a handler kind
"""

from __future__ import annotations

from hypothesis import strategies as st

from tagscope import BodyAction, HandlerKind, VariableDescriptor, VariableScope, lifecycle_trace

# ---------------------------------------------------------------------------
# Descriptor strategies
# ---------------------------------------------------------------------------

identifier = st.from_regex(r"[a-z_][a-zA-Z0-9_]{0,12}", fullmatch=True)

type_name = st.sampled_from(
    [
        "java.lang.String",
        "java.lang.Integer",
        "java.util.Map",
        "java.util.Iterator",
        "Boolean",
        "Object",
        "com.example.Row",
    ]
)

scope = st.sampled_from(list(VariableScope))

handler_kind = st.sampled_from(list(HandlerKind))

descriptor = st.builds(
    VariableDescriptor,
    name=identifier,
    type_name=type_name,
    declare=st.booleans(),
    scope=scope,
)

# Unique names keep every set collision-free regardless of scope
descriptor_set = st.lists(descriptor, min_size=0, max_size=8, unique_by=lambda d: d.name)

# ---------------------------------------------------------------------------
# Trace strategies
# ---------------------------------------------------------------------------


@st.composite
def kind_and_trace(draw):
    """A handler kind with one runtime trace it can produce."""
    kind = draw(handler_kind)
    actions = [BodyAction.SKIP_BODY, BodyAction.EVAL_BODY_INCLUDE]
    if kind is HandlerKind.BODY_BUFFERING:
        actions.append(BodyAction.EVAL_BODY_BUFFERED)
    action = draw(st.sampled_from(actions))
    iterations = draw(st.integers(min_value=1, max_value=5))
    return kind, lifecycle_trace(kind, body_action=action, iterations=iterations)
