"""
Role administration service for the ACL engine.
"""

from typing import Dict, Optional

from shared.base_service import BaseService
from shared.config import ServiceConfig, get_config
from shared.errors import ValidationError
from shared.metrics import MetricsCollector

from .models import RoleAssignmentRequest, RoleCheckResponse, RoleListResponse
from .store import RoleStore, build_store, configure


class ACLService(BaseService):
    """Exposes the role store over HTTP."""

    def __init__(self, store: Optional[RoleStore] = None,
                 config: Optional[ServiceConfig] = None,
                 metrics: Optional[MetricsCollector] = None):
        config = config or get_config("acl", 8013)
        super().__init__("acl", config.port, config=config, metrics=metrics)

        self.store = store or build_store(self.config)
        configure(self.store)

        self._setup_acl_routes()

    def _setup_acl_routes(self):
        """Set up role administration routes."""

        @self.app.get("/")
        async def root():
            """Root endpoint."""
            return {
                "service": "acl",
                "message": "Role-based authorization service",
                "version": "1.0.0",
                "store": self.store.backend_name
            }

        @self.app.post("/roles", status_code=201)
        def assign_role(request: RoleAssignmentRequest):
            """Grant a role to a suspect."""
            self._validate_scope(request)
            self.store.assign(request.role, request.suspect_id, request.scope())
            return {"status": "assigned", **request.model_dump()}

        @self.app.delete("/roles")
        def revoke_role(request: RoleAssignmentRequest):
            """Revoke exactly the given role assignment."""
            self._validate_scope(request)
            self.store.revoke(request.role, request.suspect_id, request.scope())
            return {"status": "revoked", **request.model_dump()}

        @self.app.get("/roles", response_model=RoleListResponse)
        def list_roles():
            """Catalogue of role names ever granted without scope."""
            roles = sorted(self.store.roles())
            return RoleListResponse(roles=roles, total=len(roles))

        @self.app.get("/suspects/{suspect_id}/roles", response_model=RoleListResponse)
        def suspect_roles(suspect_id: str):
            """Unscoped roles of one suspect."""
            roles = sorted(self.store.roles(suspect_id))
            return RoleListResponse(suspect_id=suspect_id, roles=roles, total=len(roles))

        @self.app.post("/roles/check", response_model=RoleCheckResponse)
        def check_role(request: RoleAssignmentRequest):
            """Membership test with instance-to-class fallback."""
            self._validate_scope(request)
            granted = self.store.check(request.role, request.suspect_id, request.scope())
            return RoleCheckResponse(
                role=request.role,
                suspect_id=request.suspect_id,
                scope_class=request.scope_class,
                scope_id=request.scope_id,
                granted=granted
            )

    @staticmethod
    def _validate_scope(request: RoleAssignmentRequest):
        if request.scope_id is not None and request.scope_class is None:
            raise ValidationError("scope_id requires scope_class", {"scope_id": request.scope_id})

    def _check_dependencies(self) -> Dict[str, str]:
        """Check role store health."""
        return {"role_store": "ok" if self.store.health_check() else "error"}


def create_app(store: Optional[RoleStore] = None,
               config: Optional[ServiceConfig] = None,
               metrics: Optional[MetricsCollector] = None):
    """Create the FastAPI application."""
    return ACLService(store=store, config=config, metrics=metrics).app


if __name__ == "__main__":
    ACLService().run()
