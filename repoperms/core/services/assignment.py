"""Role assignment operations for repository owners"""

from typing import Iterable, List, Optional

from repoperms.core.errors import InvalidSyntaxError, NotAuthorizedError
from repoperms.core.permissions import MutationResult, PermissionStore
from repoperms.core.rules import ResolutionContext, RoleResolver, Rule
from repoperms.core.rules.interfaces import Authorization
from repoperms.infrastructure.logging import bind_context, get_logger

logger = get_logger(__name__)

ADD_OPERATIONS = {"+", "add"}
REMOVE_OPERATIONS = {"-", "remove"}


class AssignmentController:
    """Owner-facing operations on a repository's role assignments.

    Every operation checks ownership first. One controller serves one
    invocation and keeps its own resolution cache.
    """

    def __init__(
        self,
        authorization: Authorization,
        resolver: RoleResolver,
        store: PermissionStore,
        context: Optional[ResolutionContext] = None,
    ):
        self.authorization = authorization
        self.resolver = resolver
        self.store = store
        self.context = context or ResolutionContext()

    def list_assignments(self, repo_id: str, acting_user: str) -> str:
        self._authorize(repo_id, acting_user, "list")
        return self.store.get(repo_id) or ""

    def list_roles(self, repo_id: str, acting_user: str) -> List[Rule]:
        self._authorize(repo_id, acting_user, "roles")
        return self.resolver.display_rules(repo_id, self.context)

    def mutate(
        self,
        repo_id: str,
        acting_user: str,
        operation: Optional[str] = None,
        role: Optional[str] = None,
        user: Optional[str] = None,
        lines: Optional[Iterable[str]] = None,
    ) -> MutationResult:
        """Apply one ``+``/``-`` change, or replace everything from ``lines``.

        With none of ``operation``, ``role`` and ``user`` given this is batch
        mode and ``lines`` is consumed to its end.
        """
        batch = operation is None and role is None and user is None
        self._authorize(repo_id, acting_user, _operation_name(operation, batch))

        if batch:
            if lines is None:
                raise InvalidSyntaxError("batch mode needs an input stream")
            return self.store.batch_replace(repo_id, lines, self.context)

        if operation is None or not role or not user:
            raise InvalidSyntaxError("expected an operation, a role and a user")

        if operation in ADD_OPERATIONS:
            return self.store.add(repo_id, role, user, self.context)
        if operation in REMOVE_OPERATIONS:
            return self.store.remove(repo_id, role, user)

        raise InvalidSyntaxError(f"unknown operation '{operation}', use '+' or '-'")

    def batch_replace(
        self,
        repo_id: str,
        acting_user: str,
        lines: Iterable[str]
    ) -> MutationResult:
        self._authorize(repo_id, acting_user, "batch")
        return self.store.batch_replace(repo_id, lines, self.context)

    def _authorize(self, repo_id: str, acting_user: str, operation: str) -> None:
        bind_context(acting_user=acting_user, repository=repo_id, operation=operation)

        # Invalid ids surface as NotAuthorizedError from the path resolver
        if not acting_user or not self.authorization.owns(repo_id, acting_user):
            logger.info("authorization_denied")
            raise NotAuthorizedError()


def _operation_name(operation: Optional[str], batch: bool) -> str:
    if batch:
        return "batch"
    if operation in ADD_OPERATIONS:
        return "add"
    if operation in REMOVE_OPERATIONS:
        return "remove"
    return "set"
