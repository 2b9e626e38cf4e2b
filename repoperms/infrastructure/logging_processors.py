"""Custom structlog processors"""

from typing import Any, Dict

from structlog.contextvars import get_contextvars
from structlog.types import EventDict, WrappedLogger

SENSITIVE_KEYS = {
    "password", "token", "secret", "api_key", "authorization", "private_key",
}


def add_service_context(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Add service-level context to logs"""
    from repoperms.core.config import get_settings

    settings = get_settings()
    event_dict["service"] = settings.app_name
    event_dict["environment"] = settings.environment
    return event_dict


def add_request_context(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Copy invocation context bound through contextvars"""
    context = get_contextvars()

    for key in ("acting_user", "repository", "operation"):
        if key in context and key not in event_dict:
            event_dict[key] = context[key]

    return event_dict


def sanitize_sensitive_data(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Remove or mask sensitive data from logs"""

    def sanitize_dict(d: Dict[str, Any]) -> Dict[str, Any]:
        sanitized = {}
        for key, value in d.items():
            lower_key = key.lower()

            if any(sensitive in lower_key for sensitive in SENSITIVE_KEYS):
                sanitized[key] = "***REDACTED***"
            elif isinstance(value, dict):
                sanitized[key] = sanitize_dict(value)
            else:
                sanitized[key] = value

        return sanitized

    return sanitize_dict(event_dict)
