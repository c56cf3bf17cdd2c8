"""Modifier stack: runs array and path modifiers in order over a ShapeState."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any

from shapesmith.engine.context import GroupContext, ShapeState
from shapesmith.engine.errors import ModifierProcessingError
from shapesmith.engine.registry import ModifierKind, ModifierRegistry, get_registry

logger = logging.getLogger(__name__)


@dataclass
class ModifierStep:
    """One entry of a stack: modifier id plus raw (unvalidated) settings."""

    id: str
    settings: Any = None
    enabled: bool = True


@dataclass
class StackResult:
    state: ShapeState
    completed: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    errors: dict[str, str] = field(default_factory=dict)
    processing_time_ms: float = 0.0


class ModifierStack:
    """Applies a sequence of modifiers, each consuming the previous state."""

    def __init__(self, registry: ModifierRegistry | None = None) -> None:
        self.registry = registry or get_registry()

    def run(
        self,
        state: ShapeState,
        steps: list[ModifierStep],
        group: GroupContext | None = None,
    ) -> StackResult:
        """Run every enabled step. A failing step is recorded and skipped."""
        start = time.perf_counter()
        result = StackResult(state=state)

        logger.info("Stack: %d steps over %d instances", len(steps), len(state))

        for position, step in enumerate(steps):
            key = f"{position}:{step.id}"
            if not step.enabled:
                result.skipped.append(key)
                continue

            t0 = time.perf_counter()
            try:
                spec = self.registry.get(step.id)
                settings = spec.coerce(step.settings)
                if settings is None:
                    result.skipped.append(key)
                    continue
                try:
                    result.state = spec.fn(result.state, settings, group)
                except Exception as e:
                    raise ModifierProcessingError(step.id, e) from e
                # Group context describes the stack input until an array reshapes it
                if spec.kind == ModifierKind.ARRAY:
                    group = None
                result.completed.append(key)
                elapsed = (time.perf_counter() - t0) * 1000
                logger.debug("  %s completed in %.1fms (%d instances)", key, elapsed, len(result.state))
            except Exception as e:
                result.errors[key] = str(e)
                logger.warning("  %s FAILED: %s", key, e)

        result.processing_time_ms = (time.perf_counter() - start) * 1000
        logger.info(
            "Stack complete: %d/%d steps in %.0fms",
            len(result.completed),
            len(steps),
            result.processing_time_ms,
        )
        return result
