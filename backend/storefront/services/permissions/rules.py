"""
Authorization rules: which actor may perform which action.

Each rule is a small strategy deciding from the actor alone and, for
ownership rules, the id of the user who owns the target.
"""

from enum import Enum

from .actors import ActingUser


class Action(Enum):
    """Actions checked by the gate."""

    READ = "READ"
    LIST = "LIST"
    FIND_BY_EMAIL = "FIND_BY_EMAIL"
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    RESTORE = "RESTORE"
    CHANGE_PASSWORD = "CHANGE_PASSWORD"


class Resource(Enum):
    """Kinds of records the gate protects."""

    USER = "user"
    CART = "cart"
    PRODUCT = "product"
    CATEGORY = "category"


class Rule(Enum):
    """Decision strategies."""

    ADMIN_ONLY = "admin_only"
    SELF_OR_ADMIN = "self_or_admin"
    SELF_ONLY = "self_only"

    def allows(self, actor: ActingUser, target_id: int | None) -> bool:
        is_self = actor.id is not None and target_id is not None and actor.id == target_id
        if self is Rule.SELF_ONLY:
            return is_self
        if self is Rule.SELF_OR_ADMIN:
            return is_self or actor.is_admin
        return actor.is_admin


ACTION_RULES: dict[tuple[Resource, Action], Rule] = {
    # Accounts
    (Resource.USER, Action.READ): Rule.SELF_OR_ADMIN,
    (Resource.USER, Action.LIST): Rule.ADMIN_ONLY,
    (Resource.USER, Action.FIND_BY_EMAIL): Rule.ADMIN_ONLY,
    (Resource.USER, Action.UPDATE): Rule.SELF_OR_ADMIN,
    (Resource.USER, Action.DELETE): Rule.SELF_OR_ADMIN,
    (Resource.USER, Action.RESTORE): Rule.ADMIN_ONLY,
    (Resource.USER, Action.CHANGE_PASSWORD): Rule.SELF_ONLY,
    # Carts belong to their user
    (Resource.CART, Action.READ): Rule.SELF_OR_ADMIN,
    # Catalog writes
    (Resource.PRODUCT, Action.CREATE): Rule.ADMIN_ONLY,
    (Resource.PRODUCT, Action.UPDATE): Rule.ADMIN_ONLY,
    (Resource.PRODUCT, Action.DELETE): Rule.ADMIN_ONLY,
    (Resource.PRODUCT, Action.RESTORE): Rule.ADMIN_ONLY,
    (Resource.CATEGORY, Action.CREATE): Rule.ADMIN_ONLY,
    (Resource.CATEGORY, Action.UPDATE): Rule.ADMIN_ONLY,
    (Resource.CATEGORY, Action.DELETE): Rule.ADMIN_ONLY,
    (Resource.CATEGORY, Action.RESTORE): Rule.ADMIN_ONLY,
}


def rule_for(resource: Resource, action: Action) -> Rule:
    """Rule for a pair. Pairs missing from the table are admin only."""
    return ACTION_RULES.get((resource, action), Rule.ADMIN_ONLY)
