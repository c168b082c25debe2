"""
Rule data models for the ACL engine.
"""

from typing import Any, Hashable, Mapping, Union
from dataclasses import dataclass
from enum import Enum

from shared.errors import InvalidPermission


class Blanket(Enum):
    """Sentinel key for unconditional allow-all / deny-all rules."""
    ALL = "all"

    def __repr__(self):
        return "ALL"


ALL = Blanket.ALL

# Name of the implicit base action, always merged first
BASE_ACTION = "_"


@dataclass(frozen=True)
class Attribute:
    """Read the named attribute of the protected instance."""
    name: str


@dataclass(frozen=True)
class Accessor:
    """Call the named zero-argument method of the protected instance."""
    name: str


@dataclass(frozen=True)
class Literal:
    """Use the wrapped value as-is."""
    value: Any


ObjectReference = Union[Attribute, Accessor, Literal]


@dataclass(frozen=True)
class ScopedPermission:
    """Role restricted to an object resolved from the protected instance."""
    role: str
    reference: ObjectReference

    def __repr__(self):
        return f"{{{self.role!r}: {self.reference!r}}}"


def to_reference(value: Any) -> ObjectReference:
    """Normalize an object reference from a rule declaration.

    Strings name attributes, explicit references are kept, anything else is
    treated as the object itself.
    """
    if isinstance(value, (Attribute, Accessor, Literal)):
        return value
    if isinstance(value, str):
        return Attribute(value)
    return Literal(value)


def normalize_permission(permission: Any) -> Hashable:
    """Turn a declared permission into a hashable rule key.

    ``{"owner_of": "doc"}`` becomes ``ScopedPermission("owner_of", Attribute("doc"))``.
    Role names and the blanket sentinel pass through. Other hashable values
    are kept so the evaluator can reject them when they're asserted.
    """
    if isinstance(permission, Mapping):
        if len(permission) != 1:
            raise InvalidPermission(
                f"Invalid ACL permission: {permission!r}",
                {"reason": "scoped permission must have exactly one entry"}
            )
        (role, reference), = permission.items()
        permission = ScopedPermission(str(role), to_reference(reference))

    try:
        hash(permission)
    except TypeError:
        raise InvalidPermission(f"Invalid ACL permission: {permission!r}")

    return permission
