"""Pytest configuration and fixtures"""

import logging
from pathlib import Path

import pytest
import structlog
import yaml

from repoperms.core import config as config_module
from repoperms.core.permissions import PermissionStore
from repoperms.core.repository import RepositoryPathResolver
from repoperms.core.rules import ResolutionContext, RoleResolver
from repoperms.core.services import AssignmentController
from repoperms.infrastructure.access_config import StaticAccessConfig
from repoperms.infrastructure.concurrency import LockManager
from repoperms.infrastructure.ownership import CreatorAuthorization

OWNER = "alice"
REPO_ID = "users/alice/proj"

ACCESS_CONFIG = {
    "roles": ["READERS", "WRITERS"],
    "groups": {
        "@user-repos": ["users/[a-z]+/.*"],
        "@all-wild": ["@user-repos"],
        "@loop-a": ["@loop-b", REPO_ID],
        "@loop-b": ["@loop-a"],
    },
    "rules": [
        {"order": 1, "permission": "R", "ref": "refs/.*", "repo": "@all-wild", "group": "@READERS"},
        {"order": 2, "permission": "RW+", "ref": "refs/heads/.*", "repo": "@user-repos", "group": "@WRITERS"},
        {"order": 3, "permission": "RW", "ref": "refs/heads/dev", "repo": "@user-repos", "group": "@developers"},
    ],
}


def make_repository(base_dir: Path, repo_id: str, creator: str) -> Path:
    """Create a bare repository directory with its creator marker"""
    repo_path = base_dir / f"{repo_id}.git"
    repo_path.mkdir(parents=True, exist_ok=True)
    (repo_path / "creator").write_text(f"{creator}\n")
    return repo_path


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo any logging configuration made by a test"""
    yield
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()
    logging.getLogger().handlers.clear()


@pytest.fixture
def base_dir(tmp_path: Path) -> Path:
    path = tmp_path / "repositories"
    path.mkdir()
    return path


@pytest.fixture
def access_config() -> StaticAccessConfig:
    return StaticAccessConfig.from_dict(ACCESS_CONFIG)


@pytest.fixture
def access_config_file(tmp_path: Path) -> Path:
    path = tmp_path / "access.yml"
    path.write_text(yaml.safe_dump(ACCESS_CONFIG))
    return path


@pytest.fixture
def repo_path(base_dir: Path) -> Path:
    return make_repository(base_dir, REPO_ID, OWNER)


@pytest.fixture
def path_resolver(base_dir: Path) -> RepositoryPathResolver:
    return RepositoryPathResolver(base_dir)


@pytest.fixture
def resolver(access_config: StaticAccessConfig) -> RoleResolver:
    return RoleResolver(access_config, access_config)


@pytest.fixture
def lock_manager(base_dir: Path) -> LockManager:
    return LockManager(base_dir / ".locks", timeout=0.2)


@pytest.fixture
def store(
    resolver: RoleResolver,
    path_resolver: RepositoryPathResolver,
    lock_manager: LockManager,
    repo_path: Path,
) -> PermissionStore:
    return PermissionStore(resolver, path_resolver, lock_manager)


@pytest.fixture
def controller(
    resolver: RoleResolver,
    store: PermissionStore,
    path_resolver: RepositoryPathResolver,
) -> AssignmentController:
    return AssignmentController(
        authorization=CreatorAuthorization(path_resolver),
        resolver=resolver,
        store=store,
        context=ResolutionContext(),
    )


@pytest.fixture
def cli_env(monkeypatch, base_dir: Path, access_config_file: Path, repo_path: Path):
    """Point the CLI settings at the test repositories"""
    monkeypatch.setenv("REPOSITORY_BASE_PATH", str(base_dir))
    monkeypatch.setenv("ACCESS_CONFIG_PATH", str(access_config_file))
    monkeypatch.setenv("LOCK_TIMEOUT_SECONDS", "0.2")
    monkeypatch.delenv("REPOPERMS_USER", raising=False)
    monkeypatch.setattr(config_module, "_settings", None)
    yield base_dir
    monkeypatch.setattr(config_module, "_settings", None)
