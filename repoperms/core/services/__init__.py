"""Application services."""
from .assignment import AssignmentController

__all__ = [
    'AssignmentController',
]
