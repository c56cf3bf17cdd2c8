"""Modifier error hierarchy.

Processors themselves never raise on bad settings or degenerate geometry;
these are for the orchestration layer (stack, boolean materialization, API).
"""

from __future__ import annotations


class ModifierError(Exception):
    """Base error carrying a machine-readable code."""

    code = "MODIFIER_ERROR"

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        if code is not None:
            self.code = code


class UnknownModifierError(ModifierError):
    code = "UNKNOWN_MODIFIER"

    def __init__(self, modifier_id: str) -> None:
        super().__init__(f"Unknown modifier: {modifier_id}")
        self.modifier_id = modifier_id


class ModifierProcessingError(ModifierError):
    code = "PROCESSING_FAILED"

    def __init__(self, modifier_id: str, cause: Exception) -> None:
        super().__init__(f"{modifier_id} failed: {cause}")
        self.modifier_id = modifier_id
        self.cause = cause


class BooleanOperationError(ModifierError):
    code = "BOOLEAN_FAILED"


class MaterializationError(ModifierError):
    code = "MATERIALIZATION_FAILED"
