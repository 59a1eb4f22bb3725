"""Order bookkeeping for a user's notes: pure reorder planning and per-owner locks."""

from .locks import OwnerLocks, get_owner_locks
from .reorder import ReorderPlan, ShiftPlan, apply_plan, compact_orders, is_dense, plan_reorder

__all__ = [
    "OwnerLocks",
    "ReorderPlan",
    "ShiftPlan",
    "apply_plan",
    "compact_orders",
    "get_owner_locks",
    "is_dense",
    "plan_reorder",
]
