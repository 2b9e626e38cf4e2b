"""Repository id validation only"""
import re

from repoperms.core.user.user_types import ValidationResult


class RepositoryValidator:
    """Handles repository id validation only"""

    REPO_ID_PATTERN = re.compile(r'^[0-9a-zA-Z][-0-9a-zA-Z._@/+]*$')

    INVALID_PATTERNS = [
        r'\.\.',           # Directory traversal
        r'//',             # Empty path segment
        r'/$',             # Trailing slash
        r'\.git$',         # Ending with .git
    ]

    def validate_id(self, repo_id: str) -> ValidationResult:
        """
        Validate a repository id such as ``users/alice/proj``

        Args:
            repo_id: Repository id to validate

        Returns:
            ValidationResult with any errors
        """
        errors = []

        if not repo_id:
            errors.append("Repository id is required")
            return ValidationResult(False, errors)

        if len(repo_id) > 255:
            errors.append("Repository id must not exceed 255 characters")

        if not self.REPO_ID_PATTERN.fullmatch(repo_id):
            errors.append(
                "Repository id must start with alphanumeric and contain only "
                "letters, numbers, dashes, underscores, dots, '@', '+' and '/'"
            )

        for pattern in self.INVALID_PATTERNS:
            if re.search(pattern, repo_id):
                errors.append(f"Repository id contains invalid pattern: {pattern}")

        return ValidationResult(len(errors) == 0, errors)
