"""Permission classes based on the caller's role."""

from __future__ import annotations

from rest_framework import permissions  # type: ignore

from .models import is_operator


class IsOperator(permissions.BasePermission):
    """Only operators (or Django staff) may access."""

    message = "Only operators can access this resource."

    def has_permission(self, request, view) -> bool:  # type: ignore
        return is_operator(request.user)


class IsOperatorOrReadOnly(permissions.BasePermission):
    """
    Anyone may read; only operators may write.
    """

    def has_permission(self, request, view) -> bool:  # type: ignore
        if request.method in permissions.SAFE_METHODS:
            return True
        return is_operator(request.user)
