"""Configuration for scope resolution."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class ResolverConfig:
    """Settings for ScopeResolver.

    Attributes:
        cache_size: Maximum number of memoized plans per resolver.
            0 disables memoization.
        reserved_names: Names the code emission backend already binds in
            generated code (its own locals). A scripting variable using one
            collides with it.

    Example:
            >>> config = ResolverConfig(
            ...     cache_size=1024,
            ...     reserved_names=frozenset({"out", "pageContext"}),
            ... )
            >>> resolver = ScopeResolver(config=config)

    """

    cache_size: int = 256
    reserved_names: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        if self.cache_size < 0:
            raise ValueError(f"cache_size must be >= 0, got {self.cache_size}")
        object.__setattr__(self, "reserved_names", frozenset(self.reserved_names))


DEFAULT_CONFIG = ResolverConfig()
