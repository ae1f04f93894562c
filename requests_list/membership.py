"""Project membership check for request records."""
from typing import Optional

from .schema import Request


def is_member(request: Request, project_id: Optional[str]) -> bool:
    """
    Check if a request belongs to the given project.

    Both the ``projects`` list and the older single ``legacyProject`` link
    count. Without a project id nothing is a member.
    """
    if not project_id:
        return False
    if project_id in request.project_refs:
        return True
    return request.legacy_project_ref == project_id
