"""Repository path calculation and security only"""
from pathlib import Path

from repoperms.core.errors import NotAuthorizedError
from repoperms.core.repository.validator import RepositoryValidator


class RepositoryPathResolver:
    """Maps repository ids onto bare repository directories"""

    def __init__(self, base_path: Path, validator: RepositoryValidator = None):
        self.base_path = Path(base_path).resolve()
        self.validator = validator or RepositoryValidator()

    def get_repository_path(self, repo_id: str) -> Path:
        """
        Calculate full repository path

        Args:
            repo_id: Repository id, e.g. ``users/alice/proj``

        Returns:
            ``<base>/<repo_id>.git``

        Raises:
            NotAuthorizedError: If the id is invalid or escapes the base path.
                Invalid ids are reported like missing repositories.
        """
        if not self.validator.validate_id(repo_id).is_valid:
            raise NotAuthorizedError()

        repo_path = (self.base_path / f"{repo_id}.git").resolve()

        if not self.validate_path_security(repo_path):
            raise NotAuthorizedError()

        return repo_path

    def validate_path_security(self, path: Path) -> bool:
        """Validate path is within base directory (prevent traversal)"""
        try:
            path.resolve().relative_to(self.base_path)
            return True
        except (ValueError, RuntimeError):
            return False
