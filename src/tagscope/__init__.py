"""tagscope — scripting-variable scope and synchronization for custom tags.

When a template invokes a custom tag, the tag may introduce named variables
into the generated code. Each variable is visible over a window relative to
the tag's start and end markers, and because the tag runs as a sequence of
lifecycle callbacks on a handler, the compiler must know after which callback
each variable has to be declared or re-bound. Getting this wrong compiles
fine and reads stale values at runtime.

Quickstart:
    >>> from tagscope import HandlerKind, VariableDescriptor, VariableScope, compute_plan
    >>> plan = compute_plan(
    ...     [
    ...         VariableDescriptor("a", "java.lang.String", scope=VariableScope.AT_BEGIN),
    ...         VariableDescriptor("b", "java.lang.String", scope=VariableScope.AT_END),
    ...     ],
    ...     HandlerKind.CLASSIC,
    ... )
    >>> [(cp.callback.method_name, cp.names) for cp in plan]
    [('doStartTag', ('a',)), ('doEndTag', ('a', 'b'))]

Architecture:
Tag metadata → VariableDescriptor[] ─┐
                                     ├→ ScopeResolver → SynchronizationPlan → code emission
Handler kind → SYNCHRONIZATION_TABLE ┘

Thread-Safety:
Every value is immutable and every operation is pure. The synchronization
table is a process-wide read-only mapping; plans may be computed
concurrently without coordination.

"""

from tagscope.config import DEFAULT_CONFIG, ResolverConfig
from tagscope.declarations import descriptor_from_declaration, descriptors_from_declarations
from tagscope.exceptions import (
    DuplicateVariableNameError,
    ErrorCode,
    InvalidDescriptorError,
    TagScopeError,
    UnscopedVariableError,
)
from tagscope.handlers import (
    BodyAction,
    ControlFlow,
    HandlerKind,
    LifecycleCallback,
    LifecycleStep,
    lifecycle_trace,
)
from tagscope.invocation import TagInvocation
from tagscope.resolver import Checkpoint, ScopeResolver, SynchronizationPlan, compute_plan
from tagscope.sync_table import (
    SYNCHRONIZATION_TABLE,
    first_sync_point,
    scopes_to_sync,
    sync_points,
)
from tagscope.variables import VariableDescriptor, VariableScope

__version__ = "0.1.0"

__all__ = [
    "BodyAction",
    "Checkpoint",
    "ControlFlow",
    "DEFAULT_CONFIG",
    "DuplicateVariableNameError",
    "ErrorCode",
    "HandlerKind",
    "InvalidDescriptorError",
    "LifecycleCallback",
    "LifecycleStep",
    "ResolverConfig",
    "SYNCHRONIZATION_TABLE",
    "ScopeResolver",
    "SynchronizationPlan",
    "TagInvocation",
    "TagScopeError",
    "UnscopedVariableError",
    "VariableDescriptor",
    "VariableScope",
    "__version__",
    "compute_plan",
    "descriptor_from_declaration",
    "descriptors_from_declarations",
    "first_sync_point",
    "lifecycle_trace",
    "scopes_to_sync",
    "sync_points",
]


# Free-threading declaration (PEP 703)
def __getattr__(name: str) -> object:
    """Module-level getattr for the free-threading declaration."""
    if name == "_Py_mod_gil":
        # 0 = Py_MOD_GIL_NOT_USED
        return 0
    raise AttributeError(f"module 'tagscope' has no attribute {name!r}")
