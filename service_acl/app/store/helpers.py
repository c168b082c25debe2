"""
Encoding helpers shared by role store backends.

Role assignments are packed into plain strings:

    "role_name"                        global role
    "role_name/ClassName"              role scoped to a class
    "role_name/ClassName/object_id"    role scoped to one object
"""

from dataclasses import dataclass
from typing import Any, Optional, Tuple, Union

from shared.errors import ValidationError

SEPARATOR = "/"


@dataclass(frozen=True)
class ScopeRef:
    """Object scope given by name, for callers without the object at hand."""
    class_name: str
    object_id: Optional[str] = None

    @property
    def is_class(self) -> bool:
        return self.object_id is None

    def class_scope(self) -> "ScopeRef":
        return ScopeRef(self.class_name)


def suspect_id(suspect: Any) -> str:
    """Storage identity of a suspect: strings and ints as-is, otherwise ``.id``."""
    if isinstance(suspect, (str, int)):
        return str(suspect)
    ident = getattr(suspect, "id", None)
    if ident is None:
        raise ValidationError(f"Can't identify suspect: {suspect!r}")
    return str(ident)


def is_class_scope(obj: Any) -> bool:
    if isinstance(obj, ScopeRef):
        return obj.is_class
    return isinstance(obj, type)


def class_of(obj: Any) -> Union[type, ScopeRef]:
    if isinstance(obj, ScopeRef):
        return obj.class_scope()
    return type(obj)


def _scope_parts(obj: Any) -> Tuple[str, ...]:
    if isinstance(obj, ScopeRef):
        if obj.object_id is None:
            return (obj.class_name,)
        return (obj.class_name, str(obj.object_id))
    if isinstance(obj, type):
        return (obj.__name__,)

    object_id = getattr(obj, "id", None)
    if object_id is None:
        raise ValidationError(f"Can't scope a role to object without id: {obj!r}")
    return (type(obj).__name__, str(object_id))


def pack(role: Any, obj: Any = None) -> str:
    """Pack a role and its optional scope into a stored entry."""
    parts = (str(role),)
    if obj is not None:
        parts += _scope_parts(obj)
    return SEPARATOR.join(parts)


def try_pack(role: Any, obj: Any = None) -> Optional[str]:
    """Like ``pack``, but ``None`` for an instance without an ``id``."""
    try:
        return pack(role, obj)
    except ValidationError:
        return None


def unpack(entry: Union[str, bytes]) -> Tuple[str, ...]:
    """Split a stored entry into ``(role[, class_name[, object_id]])``."""
    if isinstance(entry, bytes):
        entry = entry.decode("utf-8")
    # Object ids may contain the separator, role and class names may not
    return tuple(entry.split(SEPARATOR, 2))
