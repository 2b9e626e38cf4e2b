"""Repository id validation and path resolution."""
from .path_resolver import RepositoryPathResolver
from .validator import RepositoryValidator

__all__ = [
    'RepositoryPathResolver',
    'RepositoryValidator',
]
