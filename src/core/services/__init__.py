"""
Core business logic services.

Layer-pure services that depend only on:
- src/core/entities/*
- src/core/interfaces/*
- src/core/exceptions.py

NO infrastructure imports. All dependencies injected via constructor.
"""

from src.core.services.reparation_lifecycle import (
    ItemLineRequest,
    PlannedMovement,
    ReparationChanges,
    ReparationDraft,
    ReparationLifecycleService,
    ServiceLineRequest,
)
from src.core.services.stock_mutation import MovementResult, StockMutationService

__all__ = [
    # Stock Mutation
    "StockMutationService",
    "MovementResult",
    # Reparation Lifecycle
    "ReparationLifecycleService",
    "ReparationDraft",
    "ReparationChanges",
    "ItemLineRequest",
    "ServiceLineRequest",
    "PlannedMovement",
]
