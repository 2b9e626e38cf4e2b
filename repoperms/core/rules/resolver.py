"""Role resolution for a single repository"""

from collections import deque
from typing import Dict, List, Optional, Set

from repoperms.core.rules.interfaces import Membership, RuleCatalog
from repoperms.core.rules.models import Rule
from repoperms.infrastructure.logging import get_logger

logger = get_logger(__name__)


class ResolutionContext:
    """Per-invocation cache of resolved rules, keyed by repository id"""

    def __init__(self):
        self._rules: Dict[str, List[Rule]] = {}

    def get(self, repo_id: str) -> Optional[List[Rule]]:
        return self._rules.get(repo_id)

    def store(self, repo_id: str, rules: List[Rule]) -> None:
        self._rules[repo_id] = rules


class RoleResolver:
    """Finds the rules and roles that apply to a repository"""

    def __init__(self, catalog: RuleCatalog, membership: Membership):
        self.catalog = catalog
        self.membership = membership

    def applicable_groups(self, repo_id: str) -> List[str]:
        """Walk the membership graph from ``repo_id``.

        Returns the repository itself followed by every group it belongs to,
        directly or through nested groups, in breadth-first order. Each node
        is expanded at most once, so cycles terminate.
        """
        visited: Set[str] = {repo_id}
        ordered = [repo_id]
        pending = deque([repo_id])

        while pending:
            node = pending.popleft()
            for parent in self.membership.parents(node):
                if parent in visited:
                    continue
                visited.add(parent)
                ordered.append(parent)
                pending.append(parent)

        return ordered

    def rules(
        self,
        repo_id: str,
        context: Optional[ResolutionContext] = None
    ) -> List[Rule]:
        """Rules owned by a recognized role that apply to ``repo_id``"""
        if context is not None:
            cached = context.get(repo_id)
            if cached is not None:
                return list(cached)

        resolved: List[Rule] = []
        for target in self.applicable_groups(repo_id):
            for raw in self.catalog.raw_rules(target):
                if not self.catalog.is_recognized_role(raw.group_id):
                    continue
                resolved.append(Rule(
                    order=raw.order,
                    permission=raw.permission,
                    ref_pattern=raw.ref_pattern,
                    role=self.catalog.role_name(raw.group_id),
                ))

        logger.debug("rules_resolved", repository=repo_id, count=len(resolved))

        if context is not None:
            context.store(repo_id, resolved)
        return list(resolved)

    def roles(
        self,
        repo_id: str,
        context: Optional[ResolutionContext] = None
    ) -> Set[str]:
        return {rule.role for rule in self.rules(repo_id, context)}

    def display_rules(
        self,
        repo_id: str,
        context: Optional[ResolutionContext] = None
    ) -> List[Rule]:
        """Rules sorted by order with ref patterns normalized for display"""
        ordered = sorted(self.rules(repo_id, context), key=lambda rule: rule.order)
        return [rule.for_display() for rule in ordered]
