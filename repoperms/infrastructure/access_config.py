"""Static access configuration: roles, groups and rules loaded from YAML"""

import re
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Pattern

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from repoperms.core.errors import ConfigurationError
from repoperms.core.rules.models import MATCH_ALL_REF, RawRule
from repoperms.infrastructure.logging import get_logger

logger = get_logger(__name__)

GROUP_PREFIX = "@"
PATTERN_CHARS = set("[]*?(){}|^$\\")


class RuleSpec(BaseModel):
    """One rule entry of the access file"""

    order: Optional[int] = None
    permission: str
    ref: str = Field(default=MATCH_ALL_REF)
    repo: str = Field(..., description="Repository id, repository pattern or @group")
    group: str = Field(..., description="Group owning the rule, e.g. @READERS")


class AccessConfigModel(BaseModel):
    roles: List[str] = Field(default_factory=list)
    groups: Dict[str, List[str]] = Field(default_factory=dict)
    rules: List[RuleSpec] = Field(default_factory=list)

    @field_validator("roles")
    @classmethod
    def strip_role_prefix(cls, v: List[str]) -> List[str]:
        return [_short_name(role) for role in v]

    @field_validator("groups")
    @classmethod
    def validate_group_names(cls, v: Dict[str, List[str]]) -> Dict[str, List[str]]:
        for name in v:
            if not name.startswith(GROUP_PREFIX):
                raise ValueError(f"group name must start with '{GROUP_PREFIX}': {name}")
        return v


def _short_name(group_id: str) -> str:
    return group_id[len(GROUP_PREFIX):] if group_id.startswith(GROUP_PREFIX) else group_id


def _is_pattern(name: str) -> bool:
    return not name.startswith(GROUP_PREFIX) and any(c in PATTERN_CHARS for c in name)


def _compile(name: str) -> Pattern[str]:
    try:
        return re.compile(name)
    except re.error as e:
        raise ConfigurationError(f"Invalid repository pattern '{name}': {e}")


class StaticAccessConfig:
    """Rule catalog and membership graph backed by one access file.

    Group members are repository ids, repository patterns (full-match
    regular expressions, for user-created repositories) or other groups.
    Groups may nest and may form cycles.
    """

    def __init__(self, model: AccessConfigModel):
        self.model = model
        self._roles = set(model.roles)
        self._patterns: Dict[str, Pattern[str]] = {}

        for members in model.groups.values():
            for member in members:
                if _is_pattern(member):
                    self._patterns[member] = _compile(member)
        for rule in model.rules:
            if _is_pattern(rule.repo):
                self._patterns[rule.repo] = _compile(rule.repo)

        self._rules: List[RawRule] = [
            RawRule(
                order=entry.order if entry.order is not None else position,
                permission=entry.permission,
                ref_pattern=entry.ref,
                group_id=entry.group,
            )
            for position, entry in enumerate(model.rules, start=1)
        ]

    @classmethod
    def from_file(cls, path: Path) -> "StaticAccessConfig":
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except FileNotFoundError:
            raise ConfigurationError(f"Access configuration not found: {path}")
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Failed to load access configuration: {e}")

        return cls.from_dict(data, source=str(path))

    @classmethod
    def from_dict(cls, data: dict, source: str = "<dict>") -> "StaticAccessConfig":
        try:
            model = AccessConfigModel.model_validate(data)
        except ValidationError as e:
            raise ConfigurationError(
                f"Invalid access configuration in {source}",
                {"errors": [err["msg"] for err in e.errors()]}
            )

        logger.debug(
            "access_config_loaded",
            source=source,
            roles=len(model.roles),
            groups=len(model.groups),
            rules=len(model.rules)
        )
        return cls(model)

    def _matches(self, name: str, node: str) -> bool:
        if name == node:
            return True
        pattern = self._patterns.get(name)
        return (
            pattern is not None
            and not node.startswith(GROUP_PREFIX)
            and pattern.fullmatch(node) is not None
        )

    def parents(self, node: str) -> Iterable[str]:
        return [
            group
            for group, members in self.model.groups.items()
            if any(self._matches(member, node) for member in members)
        ]

    def raw_rules(self, target: str) -> List[RawRule]:
        return [
            rule.model_copy()
            for entry, rule in zip(self.model.rules, self._rules)
            if self._matches(entry.repo, target)
        ]

    def is_recognized_role(self, group_id: str) -> bool:
        return _short_name(group_id) in self._roles

    def role_name(self, group_id: str) -> str:
        return _short_name(group_id)

    @property
    def roles(self) -> List[str]:
        return list(self.model.roles)
