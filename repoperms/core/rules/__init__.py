"""Rule catalog interfaces and role resolution."""
from .models import RawRule, Rule, display_ref
from .resolver import ResolutionContext, RoleResolver

__all__ = [
    'RawRule',
    'Rule',
    'display_ref',
    'ResolutionContext',
    'RoleResolver',
]
