"""
Role derivation and authorization decisions.

Every decision is made from the stored user record resolved for the current
request, never from the roles embedded in a token.
"""

from app.core.errors import Forbidden, ValidationFailed
from app.models.user import User, UserLevel

ROLE_ADMIN = "ROLE_ADMIN"
ROLE_ADVANCED = "ROLE_ADVANCED"
ROLE_USER = "ROLE_USER"

# One entry per UserLevel member; roles_for fails on anything else.
ROLES_BY_LEVEL: dict[UserLevel, tuple[str, ...]] = {
    UserLevel.ADMIN: (ROLE_ADMIN, ROLE_USER),
    UserLevel.ADVANCED: (ROLE_ADVANCED, ROLE_USER),
    UserLevel.BASIC: (ROLE_USER,),
}

SELF_UPDATABLE_FIELDS = frozenset({"name", "username", "password"})
ADMIN_UPDATABLE_FIELDS = SELF_UPDATABLE_FIELDS | {"level", "active"}


def roles_for(level: UserLevel) -> list[str]:
    """Return the ordered, de-duplicated role tags for a level. Unknown levels raise ValueError."""
    try:
        roles = ROLES_BY_LEVEL[UserLevel(level)]
    except (KeyError, ValueError) as e:
        raise ValueError(f"Unknown user level: {level!r}") from e
    return list(dict.fromkeys(roles))


def parse_level(value: object) -> UserLevel:
    """Parse an inbound level value; anything outside the enum is a validation failure."""
    if isinstance(value, UserLevel):
        return value
    if isinstance(value, str):
        try:
            return UserLevel(value)
        except ValueError:
            pass
    allowed = ", ".join(lvl.value for lvl in UserLevel)
    raise ValidationFailed("Invalid level", errors=[f"level: must be one of {allowed}"])


def is_admin(user: User) -> bool:
    return user.level == UserLevel.ADMIN


def is_self(actor: User, target: User) -> bool:
    return actor.id is not None and actor.id == target.id


def ensure_admin(actor: User) -> None:
    """Gate for list, get, create and delete."""
    if not is_admin(actor):
        raise Forbidden("Admin access required.")


def ensure_can_update(actor: User, target: User) -> None:
    """Admins may update anyone; everyone else only themselves."""
    if not (is_admin(actor) or is_self(actor, target)):
        raise Forbidden("You may only update your own account.")


def updatable_fields(actor: User, target: User) -> frozenset[str]:
    """
    Fields the actor may change on target, once ensure_can_update has passed.

    level and active are admin-only; for anyone else they are dropped from
    the request without error.
    """
    if is_admin(actor):
        return frozenset(ADMIN_UPDATABLE_FIELDS)
    if is_self(actor, target):
        return SELF_UPDATABLE_FIELDS
    return frozenset()
