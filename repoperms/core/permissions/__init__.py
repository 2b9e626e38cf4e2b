"""Role assignment records."""
from .models import Assignment, MutationOutcome, MutationResult
from .store import PermissionStore

__all__ = [
    'Assignment',
    'MutationOutcome',
    'MutationResult',
    'PermissionStore',
]
