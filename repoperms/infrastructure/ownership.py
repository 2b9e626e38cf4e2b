"""Repository ownership from the creator file"""

from repoperms.core.errors import NotAuthorizedError
from repoperms.core.repository import RepositoryPathResolver
from repoperms.infrastructure.filesystem import FileReader
from repoperms.infrastructure.logging import get_logger

logger = get_logger(__name__)


class CreatorAuthorization:
    """A repository is owned by the user named in its creator file"""

    def __init__(self, path_resolver: RepositoryPathResolver, creator_filename: str = "creator"):
        self.path_resolver = path_resolver
        self.creator_filename = creator_filename
        self.reader = FileReader(path_resolver.base_path)

    def creator(self, repo_id: str) -> str:
        """Creator of ``repo_id``, or an empty string if unknown"""
        try:
            repo_path = self.path_resolver.get_repository_path(repo_id)
        except NotAuthorizedError:
            return ""

        if not repo_path.is_dir():
            return ""

        content = self.reader.read_text(repo_path / self.creator_filename)
        return (content or "").strip()

    def owns(self, repo_id: str, acting_user: str) -> bool:
        creator = self.creator(repo_id)
        allowed = bool(creator) and creator == acting_user
        logger.debug("ownership_checked", repository=repo_id, user=acting_user, allowed=allowed)
        return allowed
