"""
Mixin for protected classes.
"""

from typing import Any, Optional

from ..acl.models import normalize_permission
from ..acl.registry import ACL, ACLRegistry, RuleBlock
from .evaluator import GuardEvaluator, get_evaluator, resolve_suspect


class Guarded:
    """Adds ACL declaration and guard calls to a protected class.

        class Document(Guarded):
            def __init__(self, user, doc):
                self.user = user
                self.doc = doc

        Document.suspects("user", rules=document_rules)
        Document(user, doc).guard("edit")
    """

    acl_evaluator: Optional[GuardEvaluator] = None

    @classmethod
    def _acl_evaluator(cls) -> GuardEvaluator:
        return cls.acl_evaluator or get_evaluator()

    @classmethod
    def acl_registry(cls) -> ACLRegistry:
        return cls._acl_evaluator().registry

    @classmethod
    def suspects(cls, suspect: Any = None, rules: Optional[RuleBlock] = None) -> ACL:
        """Define or extend the ACL of this class."""
        return cls.acl_registry().define(cls, suspect, rules)

    access_control = suspects

    @property
    def suspect(self) -> Any:
        """Current actor, resolved once per instance from the ACL's suspect descriptor."""
        if "_acl_suspect" not in self.__dict__:
            acl = self.acl_registry().lookup(type(self))
            self.__dict__["_acl_suspect"] = resolve_suspect(self, acl.suspect)
        return self.__dict__["_acl_suspect"]

    def guard(self, *actions: str, rules: Optional[RuleBlock] = None) -> bool:
        """Raise ``AccessDenied`` unless the suspect may perform ``actions``.

        Extra rules for this call only can be given as a block:

            doc.guard("edit", rules=lambda acl: acl.deny("intern"))
        """
        evaluator = self._acl_evaluator()
        # Check the ACL exists before resolving the suspect from it
        evaluator.registry.lookup(type(self))
        return evaluator.guard(self, *actions, rules=rules, suspect=self.suspect)

    authorize = guard

    def assert_permission(self, permission: Any) -> bool:
        """Whether the current suspect holds ``permission`` on this instance."""
        return self._acl_evaluator().assert_permission(self, self.suspect, normalize_permission(permission))
