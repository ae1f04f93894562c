"""
Ordering helpers for project lists.

Projects created before explicit ordering existed carry no ``requests``
list; their members are ordered by ``(project_order, name)`` instead.
"""
from functools import cmp_to_key
from typing import Iterable, List, Optional, Sequence

from .schema import Request


def compare_legacy(a: Request, b: Request) -> int:
    """Compare by project_order, then name. Returns -1, 0 or 1."""
    if a.project_order > b.project_order:
        return 1
    if a.project_order < b.project_order:
        return -1
    if a.name > b.name:
        return 1
    if a.name < b.name:
        return -1
    return 0


def legacy_sort(requests: Iterable[Request]) -> List[Request]:
    """Return a new list in legacy order. Equal records keep their input order."""
    return sorted(requests, key=cmp_to_key(compare_legacy))


def ids_equal(a: Optional[Sequence[str]], b: Optional[Sequence[str]]) -> bool:
    """True when both id sequences are absent or hold the same ids in the same order."""
    if a is None and b is None:
        return True
    if a is None or b is None:
        return False
    if len(a) != len(b):
        return False
    for left, right in zip(a, b):
        if left != right:
            return False
    return True
