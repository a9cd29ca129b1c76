"""Scope resolver - synchronization plans for tag invocations.

Given the scripting variables of one tag invocation and the kind of its
handler, compute which variables code emission must declare or re-bind
after each lifecycle callback. The plan is the only artifact the emission
backend consumes: for every entry in ``declarations`` it emits a typed local
declaration bound to the freshly read attribute value, and for every entry
in ``resyncs`` a plain assignment.

Thread-Safety:
    ``compute_plan`` is a pure function of its inputs. The memo on a
    ScopeResolver is a plain dict touched by single get/set/pop operations,
    so one resolver can be shared across threads without locks.

"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
from typing import overload

from tagscope import terminal
from tagscope.config import DEFAULT_CONFIG, ResolverConfig
from tagscope.exceptions import DuplicateVariableNameError, UnscopedVariableError
from tagscope.handlers import HandlerKind, LifecycleCallback
from tagscope.invocation import TagInvocation
from tagscope.sync_table import scopes_to_sync
from tagscope.variables import VariableDescriptor, VariableScope

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Checkpoint:
    """Variables to bind right after one lifecycle callback returns.

    Attributes:
        callback: The callback this checkpoint follows.
        declarations: Variables declared here for the first time.
        resyncs: Variables re-bound here (assignment, no declaration).
    """

    callback: LifecycleCallback
    declarations: frozenset[VariableDescriptor] = frozenset()
    resyncs: frozenset[VariableDescriptor] = frozenset()

    @property
    def is_empty(self) -> bool:
        return not (self.declarations or self.resyncs)

    @property
    def variables(self) -> frozenset[VariableDescriptor]:
        """Every variable touched at this checkpoint."""
        return self.declarations | self.resyncs

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(sorted(d.name for d in self.variables))


@dataclass(frozen=True, slots=True)
class SynchronizationPlan:
    """Ordered checkpoints for one tag invocation, one per lifecycle callback.

    Behaves as a read-only sequence of Checkpoint in lifecycle order.
    """

    kind: HandlerKind
    checkpoints: tuple[Checkpoint, ...]

    def __len__(self) -> int:
        return len(self.checkpoints)

    def __iter__(self) -> Iterator[Checkpoint]:
        return iter(self.checkpoints)

    @overload
    def __getitem__(self, index: int) -> Checkpoint: ...

    @overload
    def __getitem__(self, index: slice) -> tuple[Checkpoint, ...]: ...

    def __getitem__(self, index: int | slice) -> Checkpoint | tuple[Checkpoint, ...]:
        return self.checkpoints[index]

    def for_callback(self, callback: LifecycleCallback) -> Checkpoint:
        """Return the checkpoint following callback.

        Raises:
            KeyError: If the plan's handler kind has no such callback.
        """
        for checkpoint in self.checkpoints:
            if checkpoint.callback is callback:
                return checkpoint
        raise KeyError(callback)

    def declared_names(self) -> frozenset[str]:
        """Names of every variable declared somewhere in the plan."""
        return frozenset(d.name for cp in self.checkpoints for d in cp.declarations)

    def replay(self, trace: Iterable[LifecycleCallback]) -> Iterator[Checkpoint]:
        """Yield checkpoints in the order a runtime trace reaches them.

        Synchronization happens at every checkpoint the trace reaches, whether
        or not the body was evaluated. Feed it ``lifecycle_trace(...)``.

        A trace through doInitBody is a buffered body: NESTED variables are
        first bound after doInitBody, not after doStartTag, so their
        declarations and resyncs move from the START checkpoint to the
        BODY_INIT one. Included and skipped bodies follow the static plan.

        Raises:
            ValueError: If the trace holds a callback foreign to the plan's kind.
        """
        trace = tuple(trace)
        by_callback = {cp.callback: cp for cp in self.checkpoints}
        if LifecycleCallback.BODY_INIT in trace and LifecycleCallback.BODY_INIT in by_callback:
            by_callback.update(self._buffered_checkpoints())
        for callback in trace:
            checkpoint = by_callback.get(callback)
            if checkpoint is None:
                raise ValueError(
                    f"{self.kind.name} handlers have no {callback.method_name}() callback"
                )
            yield checkpoint

    def _buffered_checkpoints(self) -> dict[LifecycleCallback, Checkpoint]:
        """START and BODY_INIT checkpoints with NESTED variables deferred."""
        start = self.for_callback(LifecycleCallback.START)
        init = self.for_callback(LifecycleCallback.BODY_INIT)
        nested_decl = frozenset(d for d in start.declarations if d.scope is VariableScope.NESTED)
        nested_sync = frozenset(d for d in start.resyncs if d.scope is VariableScope.NESTED)
        return {
            LifecycleCallback.START: Checkpoint(
                callback=LifecycleCallback.START,
                declarations=start.declarations - nested_decl,
                resyncs=start.resyncs - nested_sync,
            ),
            LifecycleCallback.BODY_INIT: Checkpoint(
                callback=LifecycleCallback.BODY_INIT,
                declarations=init.declarations | nested_decl,
                resyncs=init.resyncs - nested_decl,
            ),
        }

    def format(self) -> str:
        """Render the plan as an aligned text table for diagnostics."""
        lines = [terminal.dim_text(f"{self.kind.name} synchronization plan:")]
        width = max(len(cp.callback.method_name) for cp in self.checkpoints)
        for cp in self.checkpoints:
            cells = [
                f"declare {terminal.variable(d.name)}: {d.type_name} "
                f"[{terminal.scope(d.scope.name)}]"
                for d in sorted(cp.declarations, key=lambda d: d.name)
            ]
            cells.extend(
                f"sync {terminal.variable(d.name)}"
                for d in sorted(cp.resyncs, key=lambda d: d.name)
            )
            label = f"after {cp.callback.method_name}()".ljust(width + 8)
            lines.append(f"  {label} {', '.join(cells) or terminal.dim_text('-')}")
        return "\n".join(lines)


def _check_scopes(
    descriptors: Sequence[VariableDescriptor], invocation: TagInvocation | None
) -> None:
    for descriptor in descriptors:
        if not isinstance(getattr(descriptor, "scope", None), VariableScope):
            raise UnscopedVariableError(descriptor, invocation=invocation)


def _check_collisions(
    descriptors: Sequence[VariableDescriptor],
    reserved_names: frozenset[str],
    invocation: TagInvocation | None,
) -> None:
    seen: dict[str, list[VariableDescriptor]] = {}
    for descriptor in descriptors:
        if descriptor.name in reserved_names:
            logger.debug("Variable %r shadows a reserved name", descriptor.name)
            raise DuplicateVariableNameError(
                descriptor.name,
                [descriptor.scope],
                invocation=invocation,
                hint=f"'{descriptor.name}' is already bound by generated code",
            )
        earlier = seen.setdefault(descriptor.name, [])
        for other in earlier:
            if other.overlaps(descriptor):
                logger.debug(
                    "Variable %r declared as %s and %s",
                    descriptor.name,
                    other.scope.name,
                    descriptor.scope.name,
                )
                raise DuplicateVariableNameError(
                    descriptor.name,
                    [other.scope, descriptor.scope],
                    invocation=invocation,
                )
        earlier.append(descriptor)


def _build_plan(
    descriptors: Sequence[VariableDescriptor], kind: HandlerKind
) -> SynchronizationPlan:
    declared: set[VariableDescriptor] = set()
    checkpoints: list[Checkpoint] = []

    for callback in kind.callbacks:
        scopes = scopes_to_sync(kind, callback)
        declarations: set[VariableDescriptor] = set()
        resyncs: set[VariableDescriptor] = set()
        for descriptor in descriptors:
            if descriptor.scope not in scopes:
                continue
            if descriptor.declare and descriptor not in declared:
                declarations.add(descriptor)
                declared.add(descriptor)
            else:
                resyncs.add(descriptor)
        checkpoints.append(
            Checkpoint(
                callback=callback,
                declarations=frozenset(declarations),
                resyncs=frozenset(resyncs),
            )
        )

    return SynchronizationPlan(kind=kind, checkpoints=tuple(checkpoints))


class ScopeResolver:
    """Compute synchronization plans, memoizing per (descriptors, kind).

    Example:
            >>> resolver = ScopeResolver()
            >>> plan = resolver.compute_plan(
            ...     [VariableDescriptor("row", "java.lang.Integer", scope=VariableScope.NESTED)],
            ...     HandlerKind.ITERATING,
            ... )
            >>> [cp.names for cp in plan]
            [('row',), ('row',), ()]

    """

    __slots__ = ("_config", "_plan_cache")

    def __init__(self, config: ResolverConfig | None = None) -> None:
        self._config = config or DEFAULT_CONFIG
        self._plan_cache: dict[
            tuple[tuple[VariableDescriptor, ...], HandlerKind], SynchronizationPlan
        ] = {}

    @property
    def config(self) -> ResolverConfig:
        return self._config

    def compute_plan(
        self,
        descriptors: Iterable[VariableDescriptor],
        kind: HandlerKind | str,
        *,
        invocation: TagInvocation | None = None,
    ) -> SynchronizationPlan:
        """Compute the synchronization plan for one tag invocation.

        Args:
            descriptors: Scripting variables of the invocation.
            kind: Resolved handler kind (or its name).
            invocation: Where the tag appears; used only in error messages.

        Returns:
            One Checkpoint per callback of kind, in lifecycle order.

        Raises:
            UnscopedVariableError: If a descriptor carries no valid scope.
            DuplicateVariableNameError: If two descriptors share a name in
                overlapping scopes, or a name is reserved.
        """
        kind = HandlerKind.coerce(kind)
        items = tuple(descriptors)
        _check_scopes(items, invocation)
        key = (items, kind)

        cached = self._plan_cache.get(key)
        if cached is not None:
            logger.debug("Plan cache hit for %s (%d variables)", kind.name, len(items))
            return cached

        _check_collisions(items, self._config.reserved_names, invocation)
        plan = _build_plan(items, kind)
        logger.debug("Computed %s plan for %d variables", kind.name, len(items))

        size = self._config.cache_size
        if size:
            if len(self._plan_cache) >= size:
                # Evict the oldest entry (dicts keep insertion order)
                self._plan_cache.pop(next(iter(self._plan_cache), None), None)
            self._plan_cache[key] = plan
        return plan

    def clear_cache(self) -> None:
        self._plan_cache.clear()

    def cache_info(self) -> dict[str, int]:
        """Current size and bound of the plan memo."""
        return {"size": len(self._plan_cache), "max_size": self._config.cache_size}


_DEFAULT_RESOLVER = ScopeResolver()


def compute_plan(
    descriptors: Iterable[VariableDescriptor],
    kind: HandlerKind | str,
    *,
    invocation: TagInvocation | None = None,
) -> SynchronizationPlan:
    """Compute a synchronization plan with the shared default resolver.

    See ScopeResolver.compute_plan.
    """
    return _DEFAULT_RESOLVER.compute_plan(descriptors, kind, invocation=invocation)
