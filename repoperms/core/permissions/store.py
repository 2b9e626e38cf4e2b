"""Persisted role assignments for each repository"""

from pathlib import Path
from typing import Iterable, List, Optional

from repoperms.core.errors import InvalidRoleError, InvalidUserError
from repoperms.core.permissions.models import (
    Assignment,
    MutationOutcome,
    MutationResult,
)
from repoperms.core.repository import RepositoryPathResolver
from repoperms.core.rules import ResolutionContext, RoleResolver
from repoperms.core.user import UsernameValidator
from repoperms.infrastructure.concurrency import LockManager
from repoperms.infrastructure.filesystem import FileReader, FileWriter
from repoperms.infrastructure.logging import get_logger

logger = get_logger(__name__)


class PermissionStore:
    """Owns the assignment file of every repository.

    Each record is a text file inside the bare repository holding one
    ``ROLE user`` line per assignment. Every write happens under the
    repository lock and replaces the file atomically.
    """

    def __init__(
        self,
        resolver: RoleResolver,
        path_resolver: RepositoryPathResolver,
        lock_manager: LockManager,
        username_validator: Optional[UsernameValidator] = None,
        perms_filename: str = "perms",
    ):
        self.resolver = resolver
        self.path_resolver = path_resolver
        self.lock_manager = lock_manager
        self.username_validator = username_validator or UsernameValidator()
        self.perms_filename = perms_filename

        self.reader = FileReader(path_resolver.base_path)
        self.writer = FileWriter(path_resolver.base_path)

    def record_path(self, repo_id: str) -> Path:
        return self.path_resolver.get_repository_path(repo_id) / self.perms_filename

    def get(self, repo_id: str) -> Optional[str]:
        """Raw record content, or None when no record exists"""
        return self.reader.read_text(self.record_path(repo_id))

    def assignments(self, repo_id: str) -> List[Assignment]:
        return [
            assignment
            for assignment in map(Assignment.from_line, self._lines(repo_id))
            if assignment is not None
        ]

    def add(
        self,
        repo_id: str,
        role: str,
        user: str,
        context: Optional[ResolutionContext] = None
    ) -> MutationResult:
        self._check_role(repo_id, role, context)
        self._check_user(user)
        assignment = Assignment(role=role, user=user)

        with self.lock_manager.acquire_lock(repo_id):
            lines = self._lines(repo_id)
            if any(Assignment.from_line(line) == assignment for line in lines):
                logger.warning("assignment_already_present", repository=repo_id, role=role, user=user)
                return MutationResult(MutationOutcome.ALREADY_PRESENT, repo_id, assignment)

            lines.append(assignment.to_line())
            self._write_sorted(repo_id, lines)

        logger.info("assignment_added", repository=repo_id, role=role, user=user)
        return MutationResult(MutationOutcome.APPLIED, repo_id, assignment)

    def remove(self, repo_id: str, role: str, user: str) -> MutationResult:
        # No role check: assignments whose role stopped resolving must stay removable
        assignment = Assignment(role=role, user=user)

        with self.lock_manager.acquire_lock(repo_id):
            lines = self._lines(repo_id)
            kept = [line for line in lines if Assignment.from_line(line) != assignment]
            if len(kept) == len(lines):
                logger.warning("assignment_not_present", repository=repo_id, role=role, user=user)
                return MutationResult(MutationOutcome.NOT_PRESENT, repo_id, assignment)

            self._write_sorted(repo_id, kept)

        logger.info("assignment_removed", repository=repo_id, role=role, user=user)
        return MutationResult(MutationOutcome.APPLIED, repo_id, assignment)

    def batch_replace(
        self,
        repo_id: str,
        lines: Iterable[str],
        context: Optional[ResolutionContext] = None
    ) -> MutationResult:
        """Replace the whole record with ``lines``, verbatim.

        Lines are checked as they are consumed and the first one whose role
        does not resolve aborts the batch before anything is written.
        """
        roles = self.resolver.roles(repo_id, context)
        accepted: List[str] = []

        for line in lines:
            fields = line.split()
            role = fields[0] if fields else ""
            if role not in roles:
                logger.warning(
                    "batch_rejected",
                    repository=repo_id,
                    role=role,
                    line_number=len(accepted) + 1
                )
                raise InvalidRoleError(role)
            accepted.append(line)

        with self.lock_manager.acquire_lock(repo_id):
            self.writer.write_text(self.record_path(repo_id), "".join(accepted))

        logger.info("assignments_replaced", repository=repo_id, count=len(accepted))
        return MutationResult(MutationOutcome.APPLIED, repo_id, count=len(accepted))

    def _check_role(self, repo_id: str, role: str, context: Optional[ResolutionContext]) -> None:
        if role not in self.resolver.roles(repo_id, context):
            raise InvalidRoleError(role)

    def _check_user(self, user: str) -> None:
        result = self.username_validator.validate_username(user)
        if not result.is_valid:
            raise InvalidUserError(user, result.errors)

    def _lines(self, repo_id: str) -> List[str]:
        content = self.get(repo_id) or ""
        return [
            line if line.endswith("\n") else line + "\n"
            for line in content.splitlines(keepends=True)
            if line.strip()
        ]

    def _write_sorted(self, repo_id: str, lines: List[str]) -> None:
        self.writer.write_text(self.record_path(repo_id), "".join(sorted(lines)))
