"""LangGraph workflow and public entry points for integrity validation."""

from scholarly_integrity.graphs.validation_workflow import (
    VALIDATION_NODES,
    avalidate,
    create_validation_workflow,
    validate,
)

__all__ = [
    "VALIDATION_NODES",
    "avalidate",
    "create_validation_workflow",
    "validate",
]
