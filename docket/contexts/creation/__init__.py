"""
Creation Context

Responsibilities:
- Validates a reviewed item batch before any tracker call
- Submits items sequentially, recording per-item failures
- Invalidates the cached analysis once a batch completes

Owns: CreationOutcome, creation request building
Never: Generates or ranks items
"""

from docket.contexts.creation.orchestrator import (
    CreatedRecord,
    CreationFailure,
    CreationOrchestrator,
    CreationOutcome,
    build_creation_request,
    validate_batch,
)

__all__ = [
    "CreationOrchestrator",
    "CreationOutcome",
    "CreatedRecord",
    "CreationFailure",
    "build_creation_request",
    "validate_batch",
]
