"""
Guard package.

Evaluates guard calls against the ACL registry:

- suspect: Actor mixin with role queries bound to the role store.
- evaluator: Rule merging per call and the allow/deny/veto walk.
- guarded: Mixin giving protected classes ``suspects`` and ``guard``.
"""

from .evaluator import GuardEvaluator, authorize, get_evaluator, guard, resolve_reference, resolve_suspect
from .guarded import Guarded
from .suspect import Suspect, SuspectRoles, is_suspect

__all__ = [
    "GuardEvaluator", "authorize", "get_evaluator", "guard", "resolve_reference",
    "resolve_suspect", "Guarded", "Suspect", "SuspectRoles", "is_suspect",
]
