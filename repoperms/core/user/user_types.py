"""Validation result types"""

from dataclasses import dataclass
from typing import List


@dataclass
class ValidationResult:
    """Result of validation check"""
    is_valid: bool
    errors: List[str]
