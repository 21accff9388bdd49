"""Contiguous 1-based ordering shared by sections and lessons."""

from collections.abc import Callable, Sequence
from typing import Protocol, TypeVar
from uuid import UUID

from app.core.exceptions import AppError, ValidationError


class Ordered(Protocol):
    id: UUID
    order_index: int


T = TypeVar("T", bound=Ordered)


def apply_order(
    siblings: Sequence[T],
    ordered_ids: list[UUID],
    *,
    lookup: Callable[[UUID], T | None],
    belongs: Callable[[T], bool],
    not_found: Callable[[UUID], AppError],
    label: str,
) -> list[T]:
    """Assign order_index 1..n following ``ordered_ids``.

    ``ordered_ids`` must name every sibling exactly once. Unknown ids raise
    ``not_found``; ids belonging to another parent raise ValidationError.
    """
    if len(set(ordered_ids)) != len(ordered_ids):
        raise ValidationError(f"Duplicate {label} ids in reorder request", field="ordered_ids")

    by_id = {item.id: item for item in siblings}
    ordered: list[T] = []
    for item_id in ordered_ids:
        item = by_id.get(item_id)
        if item is None:
            found = lookup(item_id)
            if found is None:
                raise not_found(item_id)
            if not belongs(found):
                raise ValidationError(
                    f"{label.capitalize()} {item_id} belongs to a different parent",
                    field="ordered_ids",
                )
            item = found
        ordered.append(item)

    if len(ordered) != len(by_id):
        raise ValidationError(
            f"Reorder request must list every {label} exactly once", field="ordered_ids"
        )

    for position, item in enumerate(ordered, start=1):
        item.order_index = position
    return ordered
