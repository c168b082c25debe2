"""
Request and response models for the ACL service.
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from .store.helpers import ScopeRef


class RoleAssignmentRequest(BaseModel):
    """Grant or revoke a role, optionally scoped to a class or object."""
    role: str = Field(..., min_length=1, pattern=r"^[^/]+$", description="Role name")
    suspect_id: str = Field(..., min_length=1, description="Suspect identity")
    scope_class: Optional[str] = Field(None, pattern=r"^[^/]+$", description="Class the role is scoped to")
    scope_id: Optional[str] = Field(None, description="Object id within scope_class")

    def scope(self) -> Optional[ScopeRef]:
        if self.scope_class is None:
            return None
        return ScopeRef(self.scope_class, self.scope_id)


class RoleCheckResponse(BaseModel):
    """Result of a role membership test."""
    role: str
    suspect_id: str
    scope_class: Optional[str] = None
    scope_id: Optional[str] = None
    granted: bool


class RoleListResponse(BaseModel):
    """Role names, sorted."""
    suspect_id: Optional[str] = None
    roles: List[str]
    total: int
