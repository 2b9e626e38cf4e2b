"""Collaborators the role resolver and controller depend on"""

from typing import Iterable, List, Protocol

from repoperms.core.rules.models import RawRule


class RuleCatalog(Protocol):
    """Source of declared rules and of the role catalog"""

    def raw_rules(self, target: str) -> List[RawRule]:
        """Rules declared on exactly ``target`` (a repository id or a group)"""
        ...

    def is_recognized_role(self, group_id: str) -> bool:
        ...

    def role_name(self, group_id: str) -> str:
        """Short role name for a recognized role group"""
        ...


class Membership(Protocol):
    """Raw membership graph; may contain cycles"""

    def parents(self, node: str) -> Iterable[str]:
        """Groups that directly contain ``node``"""
        ...


class Authorization(Protocol):

    def owns(self, repo_id: str, acting_user: str) -> bool:
        ...
