"""
Permission groups and actor evaluation.

Field permissions are expressed as sets of group names. The current user is
reduced once to an ``Actor`` (its group set) and every check runs against
that value, so the rest of the library never inspects Django users directly.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, FrozenSet, Iterable, Optional, Union

logger = logging.getLogger(__name__)

GUESTS = "guests"
MEMBERS = "members"
ADMINS = "admins"


class Operation(str, Enum):
    """Field-level operations a group set can grant."""

    CREATE = "create"
    READ = "read"
    UPDATE = "update"


@dataclass(frozen=True)
class Actor:
    """The permission identity of the current user."""

    groups: FrozenSet[str] = frozenset({GUESTS})
    user: Any = field(default=None, compare=False, hash=False)

    @property
    def is_admin(self) -> bool:
        return ADMINS in self.groups

    @property
    def is_authenticated(self) -> bool:
        return MEMBERS in self.groups

    @property
    def user_id(self) -> Optional[str]:
        if self.user is None:
            return None
        pk = getattr(self.user, "pk", None)
        return str(pk) if pk is not None else None

    def is_member_of(self, groups: Iterable[str]) -> bool:
        return bool(self.groups.intersection(groups))


GUEST_ACTOR = Actor()


def actor_for_user(user: Any) -> Actor:
    """
    Build the actor for a Django user.

    ``None`` and anonymous users are guests. Authenticated users are guests
    and members, plus one group per Django auth group. Superusers are also
    admins.
    """
    if isinstance(user, Actor):
        return user
    if user is None or not getattr(user, "is_authenticated", False):
        return Actor(groups=frozenset({GUESTS}), user=user)

    groups = {GUESTS, MEMBERS}
    user_groups = getattr(user, "groups", None)
    if user_groups is not None and hasattr(user_groups, "values_list"):
        groups.update(str(name) for name in user_groups.values_list("name", flat=True))
    if getattr(user, "is_superuser", False):
        groups.add(ADMINS)
    return Actor(groups=frozenset(groups), user=user)


PermissionRule = Union[Iterable[str], Callable[[Actor, Optional[dict]], bool], None]


def normalize_rule(rule: PermissionRule) -> Union[FrozenSet[str], Callable, None]:
    """Freeze group iterables; keep predicates and ``None`` as they are."""
    if rule is None or callable(rule):
        return rule
    if isinstance(rule, str):
        return frozenset({rule})
    return frozenset(rule)


def check_rule(rule: Any, actor: Actor, document: Optional[dict] = None) -> bool:
    """Return True when ``rule`` grants access to ``actor``."""
    if actor.is_admin:
        return True
    if rule is None:
        return False
    if callable(rule):
        try:
            return bool(rule(actor, document))
        except Exception as exc:
            logger.warning("Permission predicate raised %s; denying access", exc)
            return False
    return actor.is_member_of(rule)
