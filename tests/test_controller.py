"""Tests for the assignment controller"""

from pathlib import Path
from unittest.mock import Mock

import pytest

from repoperms.core.errors import (
    GENERIC_ACCESS_ERROR,
    InvalidRoleError,
    InvalidSyntaxError,
    NotAuthorizedError,
)
from repoperms.core.permissions import MutationOutcome, PermissionStore
from repoperms.core.rules import RawRule, ResolutionContext, RoleResolver
from repoperms.core.services import AssignmentController

from conftest import OWNER, REPO_ID, make_repository


class TestAuthorization:
    """Test the ownership check in front of every operation"""

    @pytest.mark.parametrize("operation", ["list", "roles", "add", "remove", "batch"])
    def test_non_owner_is_rejected(self, controller: AssignmentController, repo_path: Path, operation: str):
        calls = {
            "list": lambda: controller.list_assignments(REPO_ID, "mallory"),
            "roles": lambda: controller.list_roles(REPO_ID, "mallory"),
            "add": lambda: controller.mutate(REPO_ID, "mallory", "+", "READERS", "mallory"),
            "remove": lambda: controller.mutate(REPO_ID, "mallory", "-", "READERS", "bob"),
            "batch": lambda: controller.batch_replace(REPO_ID, "mallory", ["READERS mallory\n"]),
        }

        with pytest.raises(NotAuthorizedError):
            calls[operation]()

        assert not (repo_path / "perms").exists()

    def test_missing_and_foreign_repositories_look_the_same(
        self, controller: AssignmentController, base_dir: Path
    ):
        make_repository(base_dir, "users/bob/secret", "bob")

        with pytest.raises(NotAuthorizedError) as missing:
            controller.list_assignments("users/alice/nothing-here", OWNER)
        with pytest.raises(NotAuthorizedError) as foreign:
            controller.list_assignments("users/bob/secret", OWNER)

        assert str(missing.value) == str(foreign.value) == GENERIC_ACCESS_ERROR
        assert missing.value.details == foreign.value.details

    @pytest.mark.parametrize("repo_id", ["../etc", "users/../../x", "", "proj.git", "/abs"])
    def test_invalid_repository_ids_look_missing(self, controller: AssignmentController, repo_id: str):
        with pytest.raises(NotAuthorizedError) as exc_info:
            controller.list_assignments(repo_id, OWNER)

        assert str(exc_info.value) == GENERIC_ACCESS_ERROR

    def test_missing_acting_user(self, controller: AssignmentController, repo_path: Path):
        with pytest.raises(NotAuthorizedError):
            controller.list_assignments(REPO_ID, "")

    def test_authorization_checked_before_store(self):
        authorization = Mock()
        authorization.owns.return_value = False
        store = Mock()
        controller = AssignmentController(authorization, Mock(), store)

        with pytest.raises(NotAuthorizedError):
            controller.mutate("proj", "bob", "+", "READERS", "carol")

        authorization.owns.assert_called_once_with("proj", "bob")
        store.add.assert_not_called()

    @pytest.mark.parametrize("args", [
        ("*", "READERS", "bob"),
        ("+", "READERS", None),
        (None, "READERS", "bob"),
        (None, None, None),
    ])
    def test_non_owner_with_malformed_arguments(self, controller: AssignmentController, repo_path: Path, args):
        operation, role, user = args

        with pytest.raises(NotAuthorizedError):
            controller.mutate(REPO_ID, "mallory", operation, role, user)

        assert not (repo_path / "perms").exists()


class TestListing:
    """Test the read operations"""

    def test_list_assignments_empty(self, controller: AssignmentController, repo_path: Path):
        assert controller.list_assignments(REPO_ID, OWNER) == ""

    def test_list_assignments(self, controller: AssignmentController, repo_path: Path):
        (repo_path / "perms").write_text("READERS bob\n")

        assert controller.list_assignments(REPO_ID, OWNER) == "READERS bob\n"

    def test_list_roles(self, controller: AssignmentController, repo_path: Path):
        rules = controller.list_roles(REPO_ID, OWNER)

        assert [rule.to_dict() for rule in rules] == [
            {"order": 1, "permission": "R", "ref": "(any)", "role": "READERS"},
            {"order": 2, "permission": "RW+", "ref": ".*", "role": "WRITERS"},
        ]


class TestMutate:
    """Test single and batch mutations"""

    def test_example_flow(self, repo_path: Path):
        """Test the single-role example end to end"""
        catalog = Mock()
        catalog.raw_rules.side_effect = lambda target: (
            [RawRule(order=1, permission="R", ref_pattern="refs/heads/.*", group_id="@READERS")]
            if target == "proj" else []
        )
        catalog.is_recognized_role.side_effect = lambda g: g.lstrip("@") == "READERS"
        catalog.role_name.side_effect = lambda g: g.lstrip("@")
        membership = Mock()
        membership.parents.return_value = []
        resolver = RoleResolver(catalog, membership)

        store = Mock(spec=PermissionStore)
        authorization = Mock()
        authorization.owns.return_value = True
        controller = AssignmentController(authorization, resolver, store)

        rules = controller.list_roles("proj", "alice")
        assert [(r.permission, r.ref_pattern, r.role) for r in rules] == [("R", ".*", "READERS")]

        controller.mutate("proj", "alice", "+", "READERS", "alice")
        store.add.assert_called_once_with("proj", "READERS", "alice", controller.context)

    def test_add_and_remove(self, controller: AssignmentController, repo_path: Path):
        assert controller.mutate(REPO_ID, OWNER, "+", "READERS", "bob").outcome == MutationOutcome.APPLIED
        assert controller.mutate(REPO_ID, OWNER, "add", "READERS", "bob").outcome == MutationOutcome.ALREADY_PRESENT
        assert (repo_path / "perms").read_text() == "READERS bob\n"

        assert controller.mutate(REPO_ID, OWNER, "-", "READERS", "bob").outcome == MutationOutcome.APPLIED
        assert controller.mutate(REPO_ID, OWNER, "remove", "READERS", "bob").outcome == MutationOutcome.NOT_PRESENT
        assert (repo_path / "perms").read_text() == ""

    def test_invalid_role(self, controller: AssignmentController, repo_path: Path):
        with pytest.raises(InvalidRoleError):
            controller.mutate(REPO_ID, OWNER, "+", "developers", "bob")

    @pytest.mark.parametrize("args", [
        ("*", "READERS", "bob"),
        ("+", "READERS", None),
        ("+", None, "bob"),
        (None, "READERS", "bob"),
    ])
    def test_malformed_arguments(self, controller: AssignmentController, repo_path: Path, args):
        operation, role, user = args

        with pytest.raises(InvalidSyntaxError):
            controller.mutate(REPO_ID, OWNER, operation, role, user, lines=["READERS bob\n"])

        assert not (repo_path / "perms").exists()

    def test_batch_mode(self, controller: AssignmentController, repo_path: Path):
        result = controller.mutate(REPO_ID, OWNER, lines=iter(["WRITERS bob\n", "READERS carol\n"]))

        assert result.outcome == MutationOutcome.APPLIED
        assert (repo_path / "perms").read_text() == "WRITERS bob\nREADERS carol\n"

    def test_batch_mode_without_input(self, controller: AssignmentController, repo_path: Path):
        with pytest.raises(InvalidSyntaxError):
            controller.mutate(REPO_ID, OWNER)

    def test_batch_is_all_or_nothing(self, controller: AssignmentController, repo_path: Path):
        controller.mutate(REPO_ID, OWNER, "+", "READERS", "bob")

        with pytest.raises(InvalidRoleError):
            controller.batch_replace(REPO_ID, OWNER, ["READERS x\n", "BOGUS y\n", "WRITERS z\n"])

        assert (repo_path / "perms").read_text() == "READERS bob\n"

    def test_controller_reuses_resolution(self, resolver: RoleResolver, store: PermissionStore, repo_path: Path):
        authorization = Mock()
        authorization.owns.return_value = True
        context = ResolutionContext()
        controller = AssignmentController(authorization, resolver, store, context)

        controller.list_roles(REPO_ID, OWNER)

        assert context.get(REPO_ID) is not None
