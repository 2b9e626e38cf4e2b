"""CLI context management."""

from dataclasses import dataclass, field
from typing import Optional

from rich.console import Console

from repoperms.cli.utils.output import OutputFormatter
from repoperms.core.config import Settings
from repoperms.core.permissions import PermissionStore
from repoperms.core.repository import RepositoryPathResolver
from repoperms.core.rules import ResolutionContext, RoleResolver
from repoperms.core.services import AssignmentController
from repoperms.core.user import UsernameValidator
from repoperms.infrastructure.access_config import StaticAccessConfig
from repoperms.infrastructure.concurrency import LockManager
from repoperms.infrastructure.ownership import CreatorAuthorization


@dataclass
class CLIContext:
    """Context object passed through CLI commands."""

    debug: bool
    settings: Settings
    formatter: OutputFormatter
    console: Console
    acting_user: Optional[str] = None
    _controller: Optional[AssignmentController] = field(default=None, repr=False)

    def get_controller(self) -> AssignmentController:
        """
        Build the assignment controller for this invocation.

        Returns:
            AssignmentController wired from settings
        """
        if self._controller is None:
            self._controller = build_controller(self.settings)
        return self._controller


def build_controller(settings: Settings) -> AssignmentController:
    """Wire the controller and its collaborators from settings."""
    access_config = StaticAccessConfig.from_file(settings.access_config_path)
    path_resolver = RepositoryPathResolver(settings.repository_base_path)
    resolver = RoleResolver(access_config, access_config)

    store = PermissionStore(
        resolver=resolver,
        path_resolver=path_resolver,
        lock_manager=LockManager(
            settings.repository_base_path / ".locks",
            timeout=settings.lock_timeout_seconds,
        ),
        username_validator=UsernameValidator(settings.username_pattern),
        perms_filename=settings.perms_filename,
    )

    return AssignmentController(
        authorization=CreatorAuthorization(path_resolver, settings.creator_filename),
        resolver=resolver,
        store=store,
        context=ResolutionContext(),
    )
