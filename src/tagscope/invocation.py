"""Source location of a tag invocation, used to pinpoint diagnostics."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class TagInvocation:
    """One use of a custom tag in a template.

    Carries only what diagnostics need to point at the offending tag.
    It never influences a computed synchronization plan.

    Attributes:
        tag_name: Prefixed tag name as written, e.g. ``"c:forEach"``.
        template_name: Template the invocation appears in.
        lineno: 1-based line of the start marker.
        col_offset: 0-based column of the start marker.
    """

    tag_name: str
    template_name: str | None = None
    lineno: int | None = None
    col_offset: int | None = None

    @property
    def location(self) -> str:
        """``template:line[:col]`` (``<template>`` when unnamed)."""
        loc = self.template_name or "<template>"
        if self.lineno:
            loc += f":{self.lineno}"
            if self.col_offset is not None:
                loc += f":{self.col_offset}"
        return loc

    def __str__(self) -> str:
        return f"<{self.tag_name}> at {self.location}"
