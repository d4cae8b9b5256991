"""Ownership policy — only a resource's owner may change or delete it.

Every owned model (Profile, Post, Comment) records its owner in
`user_id`, set at creation and never reassigned. Experience and
education entries belong to a profile, so they are checked against the
profile that holds them. Reads never go through this check.
"""

from typing import Any, Optional

from devconnect.errors import ErrorKind, Rejected


def assert_owner(
    resource: Optional[Any],
    acting_identity: str,
    what: str = "Resource",
) -> Optional[Rejected]:
    """Return None if `acting_identity` owns `resource`, else a Rejected.

    NOT_FOUND when the resource didn't resolve, FORBIDDEN when it is
    owned by someone else.
    """
    if resource is None:
        return Rejected(ErrorKind.NOT_FOUND, f"{what} not found")
    if str(resource.user_id) != str(acting_identity):
        return Rejected(ErrorKind.FORBIDDEN, "User not authorized")
    return None
