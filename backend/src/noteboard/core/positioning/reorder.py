"""
Reorder engine.

Pure functions over order indexes. Each owner's notes carry ``order`` values
that must stay a dense permutation ``0..N-1``. Moving one note from
``old`` to ``target`` shifts the notes in between by one slot:

    target > old: siblings in (old, target] move up one slot   (delta -1)
    target < old: siblings in [target, old) move down one slot (delta +1)

Nothing here touches storage; the position store turns a plan into one bulk
update plus one write of the moved note.
"""

from dataclasses import dataclass
from typing import Dict, Hashable, Iterable, List, Optional, Sequence, Tuple, TypeVar

from ..exceptions import InvalidOrderError, ValidationError

K = TypeVar("K", bound=Hashable)


@dataclass(frozen=True)
class ShiftPlan:
    """Add ``delta`` to every sibling whose order is within ``[lower, upper]``."""

    lower: int
    upper: int
    delta: int

    def covers(self, order: int) -> bool:
        return self.lower <= order <= self.upper


@dataclass(frozen=True)
class ReorderPlan:
    old_order: int
    new_order: int
    shift: Optional[ShiftPlan]

    @property
    def is_noop(self) -> bool:
        return self.shift is None


def _require_int(value, field: str) -> int:
    # bool is an int subclass but never a valid index
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{field} must be an integer", field=field)
    return value


def plan_reorder(old_order: int, target_order: int, count: int) -> ReorderPlan:
    """Compute the minimal sibling shift that keeps orders dense.

    Raises ``InvalidOrderError`` when ``target_order`` is outside ``[0, count-1]``.
    """
    old_order = _require_int(old_order, "oldOrder")
    target_order = _require_int(target_order, "order")

    if not 0 <= target_order < count:
        raise InvalidOrderError(target_order, count)

    if target_order == old_order:
        return ReorderPlan(old_order, target_order, None)

    if target_order > old_order:
        shift = ShiftPlan(lower=old_order + 1, upper=target_order, delta=-1)
    else:
        shift = ShiftPlan(lower=target_order, upper=old_order - 1, delta=1)

    return ReorderPlan(old_order, target_order, shift)


def apply_plan(orders: Dict[K, int], moved: K, plan: ReorderPlan) -> Dict[K, int]:
    """Return a copy of ``orders`` with ``plan`` applied in memory."""
    result = dict(orders)
    if plan.is_noop:
        return result
    for key, order in orders.items():
        if key != moved and plan.shift.covers(order):
            result[key] = order + plan.shift.delta
    result[moved] = plan.new_order
    return result


def is_dense(orders: Iterable[int]) -> bool:
    """True when ``orders`` is exactly ``{0, ..., len-1}`` with no repeats."""
    values = list(orders)
    return sorted(values) == list(range(len(values)))


def compact_orders(slots: Sequence[Tuple[K, int]]) -> List[Tuple[K, int]]:
    """Renumber ``(key, order)`` slots, already in board order, to ``0..N-1``.

    Returns only the slots whose order changes.
    """
    return [(key, index) for index, (key, order) in enumerate(slots) if order != index]
