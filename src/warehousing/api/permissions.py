"""Permission checks for mutating routes.

Role management lives outside this service. Routes ask a predicate
``can_perform(user_id, resource, action)``; the default allows everything and
deployments install their own with :func:`set_permission_predicate`.
"""

from fastapi import Header, HTTPException


def allow_all(user_id, resource, action):  # noqa: ARG001
    return True


_predicate = allow_all


def set_permission_predicate(predicate):
    global _predicate
    _predicate = predicate


def reset_permission_predicate():
    global _predicate
    _predicate = allow_all


def require(resource: str, action: str):
    """Route dependency that rejects the request with 403 when the predicate denies it."""

    def check(x_user_id: str = Header(default="")):
        if not _predicate(x_user_id or None, resource, action):
            raise HTTPException(status_code=403, detail=f"Not allowed to {action} {resource}")
        return x_user_id or None

    return check
