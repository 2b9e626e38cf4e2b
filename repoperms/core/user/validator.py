"""Username validation module - handles username validation only"""

import re
from typing import Pattern, Union

from repoperms.core.user.user_types import ValidationResult

DEFAULT_USERNAME_PATTERN = r'^@?[0-9a-zA-Z][-0-9a-zA-Z._@+]*$'


class UsernameValidator:
    """Checks usernames against the service-wide username pattern"""

    def __init__(self, pattern: Union[str, Pattern[str]] = DEFAULT_USERNAME_PATTERN):
        self.pattern = re.compile(pattern) if isinstance(pattern, str) else pattern

    def validate_username(self, username: str) -> ValidationResult:
        """
        Validate username format

        Args:
            username: The username to validate

        Returns:
            ValidationResult with any errors
        """
        errors = []

        if not username:
            errors.append("Username is required")
            return ValidationResult(False, errors)

        if not self.pattern.fullmatch(username):
            errors.append(
                f"Username must match pattern {self.pattern.pattern}"
            )

        return ValidationResult(len(errors) == 0, errors)
