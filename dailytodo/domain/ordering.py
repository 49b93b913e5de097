"""Manual sort order: dense renumbering after a drag-reorder, and slots for new tasks"""
from collections.abc import Iterable

from dailytodo.domain.task_template import TaskTemplate


def reorder(templates: list[TaskTemplate]) -> list[TaskTemplate]:
    """Assign sort_order 0..n-1 following the list order.

    Inactive templates in the list are left untouched and do not consume a slot.
    """
    position = 0
    for template in templates:
        if not template.is_active:
            continue
        template.sort_order = position
        position += 1
    return templates


def next_sort_order(templates: Iterable[TaskTemplate]) -> int:
    """max(sort_order) + 1 over active templates; 0 for an empty list."""
    orders = [t.sort_order for t in templates if t.is_active]
    if not orders:
        return 0
    return max(orders) + 1
