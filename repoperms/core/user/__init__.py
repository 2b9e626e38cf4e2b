"""Username validation."""
from .user_types import ValidationResult
from .validator import UsernameValidator

__all__ = [
    'UsernameValidator',
    'ValidationResult',
]
