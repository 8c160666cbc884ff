"""
Authorization gate.

Usage:
    from storefront.services.permissions import ActingUser, Action, Resource, authorize

    authorize(actor, Action.UPDATE, Resource.USER, target_id=user_id)
"""

from .actors import ActingUser
from .rules import ACTION_RULES, Action, Resource, Rule, rule_for
from .context import PermissionContext, authorize

__all__ = [
    "ActingUser",
    "ACTION_RULES",
    "Action",
    "Resource",
    "Rule",
    "rule_for",
    "PermissionContext",
    "authorize",
]
