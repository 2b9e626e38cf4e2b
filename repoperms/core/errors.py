"""Exception hierarchy for repoperms"""

from typing import Any, Dict, List, Optional

GENERIC_ACCESS_ERROR = "repo does not exist, or you are not authorized"


class PermsError(Exception):
    """Base exception for all repoperms errors"""

    code = "PERMS-500"
    exit_code = 1

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class NotAuthorizedError(PermsError):
    """Raised when the repository is missing or not owned by the caller.

    The two cases share one message so callers cannot probe for existence.
    """

    code = "PERMS-403"

    def __init__(self):
        super().__init__(GENERIC_ACCESS_ERROR)


class InvalidRoleError(PermsError):
    """Raised when a role does not resolve for the repository"""

    code = "PERMS-422"

    def __init__(self, role: str):
        self.role = role
        super().__init__(f"invalid role '{role}'", {"role": role})


class InvalidUserError(PermsError):
    """Raised when a username fails validation"""

    code = "PERMS-422"

    def __init__(self, user: str, errors: Optional[List[str]] = None):
        self.user = user
        self.errors = errors or []
        super().__init__(
            f"invalid user '{user}'",
            {"user": user, "errors": self.errors}
        )


class InvalidSyntaxError(PermsError):
    """Raised when operation arguments are malformed"""

    code = "PERMS-400"

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"invalid syntax: {reason}", {"reason": reason})


class ConfigurationError(PermsError):
    """Raised when the access configuration is unreadable or invalid"""
    pass


class StorageError(PermsError):
    """Raised when a permission record cannot be read or written"""
    pass


class LockTimeoutError(StorageError):
    """Raised when a repository lock cannot be acquired in time"""

    def __init__(self, resource_id: str, timeout: float):
        self.resource_id = resource_id
        self.timeout = timeout
        super().__init__(
            f"Failed to acquire lock for {resource_id}: timeout",
            {"resource_id": resource_id, "timeout": timeout}
        )
