"""
Permission Context - Main entry point for permission checks.
"""

from shared.utils.exceptions import UnauthorizedError

from .actors import ActingUser
from .rules import Action, Resource, rule_for


class PermissionContext:
    """
    Context for performing permission checks for one acting user.

    Usage:
        ctx = PermissionContext(actor)

        if ctx.can(Action.READ, Resource.USER, target_id=user_id):
            ...

        ctx.require(Action.DELETE, Resource.PRODUCT)
    """

    def __init__(self, actor: ActingUser):
        self._actor = actor

    @property
    def actor(self) -> ActingUser:
        return self._actor

    @property
    def is_admin(self) -> bool:
        return self._actor.is_admin

    def can(self, action: Action, resource: Resource, target_id: int | None = None) -> bool:
        """
        Check if the actor may perform ``action`` on ``resource``.

        Args:
            action: The attempted action
            resource: The kind of record
            target_id: Id of the user owning the record, for ownership rules
        """
        return rule_for(resource, action).allows(self._actor, target_id)

    def require(self, action: Action, resource: Resource, target_id: int | None = None) -> None:
        """
        Raise unless ``can`` allows the action.

        Raises:
            UnauthorizedError: logged with the actor and target
        """
        if not self.can(action, resource, target_id):
            raise UnauthorizedError(
                action.value,
                resource.value,
                actor_id=self._actor.id,
                target_id=target_id,
                is_admin=self._actor.is_admin,
            )


def authorize(
    actor: ActingUser,
    action: Action,
    resource: Resource,
    target_id: int | None = None,
) -> None:
    """Shorthand for ``PermissionContext(actor).require(...)``."""
    PermissionContext(actor).require(action, resource, target_id)
