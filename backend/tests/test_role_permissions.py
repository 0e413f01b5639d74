"""Tests for permission grouping and the role permission toggle."""

import pytest

from tableside.core.errors import Conflict, NotFound
from tableside.models.staff import Permission
from tableside.services import role_service
from tableside.services.role_service import PermissionSet, group_permissions_by_category


class TestPermissionSet:
    def test_toggle_adds_then_removes(self):
        start = PermissionSet.of([1, 2])
        assert 3 in start.toggle(3)
        assert 2 not in start.toggle(2)

    @pytest.mark.parametrize("ids,pid", [([], 1), ([1, 2, 3], 2), ([5], 9)])
    def test_toggle_twice_restores(self, ids, pid):
        start = PermissionSet.of(ids)
        assert start.toggle(pid).toggle(pid) == start

    def test_duplicates_collapse(self):
        assert PermissionSet.of([4, 4, 1]).to_list() == [1, 4]


class TestGrouping:
    def test_categories_and_names_sorted(self):
        perms = [
            Permission(id=1, name="view_orders", category="Orders"),
            Permission(id=2, name="edit_menu", category="Menu"),
            Permission(id=3, name="cancel_orders", category="Orders"),
        ]
        grouped = group_permissions_by_category(perms)
        assert list(grouped) == ["Menu", "Orders"]
        assert [p.name for p in grouped["Orders"]] == ["cancel_orders", "view_orders"]

    def test_empty(self):
        assert dict(group_permissions_by_category([])) == {}


class TestToggleRolePermission:
    def test_grant_and_revoke(self, db_session, test_role, permissions):
        role = role_service.toggle_role_permission(db_session, test_role.id, permissions[1].id)
        assert sorted(role.permissions) == sorted([permissions[0].id, permissions[1].id])
        assert role.version == 2

        role = role_service.toggle_role_permission(db_session, test_role.id, permissions[1].id)
        assert role.permissions == [permissions[0].id]
        assert role.version == 3

    def test_stale_version_conflicts(self, db_session, test_role, permissions):
        role_service.toggle_role_permission(db_session, test_role.id, permissions[1].id, expected_version=1)
        with pytest.raises(Conflict):
            role_service.toggle_role_permission(db_session, test_role.id, permissions[2].id, expected_version=1)
        db_session.refresh(test_role)
        assert permissions[2].id not in test_role.permissions

    def test_unknown_permission(self, db_session, test_role):
        with pytest.raises(NotFound):
            role_service.toggle_role_permission(db_session, test_role.id, 9999)

    def test_unknown_role(self, db_session, permissions):
        with pytest.raises(NotFound):
            role_service.toggle_role_permission(db_session, 9999, permissions[0].id)

    def test_deleting_permission_revokes_it(self, db_session, test_role, permissions):
        role_service.delete_permission(db_session, permissions[0].id)
        db_session.refresh(test_role)
        assert test_role.permissions == []
        assert test_role.version == 2


class TestConcurrentRoleWrites:
    def test_second_writer_with_stale_copy_conflicts(self, session_factory, test_role, permissions):
        first, second = session_factory(), session_factory()
        try:
            # Both sessions hold the role at version 1
            role_service.get_role(first, test_role.id)
            role_service.get_role(second, test_role.id)

            role_service.toggle_role_permission(first, test_role.id, permissions[1].id, expected_version=1)
            with pytest.raises(Conflict):
                role_service.toggle_role_permission(second, test_role.id, permissions[2].id, expected_version=1)
        finally:
            first.close()
            second.close()

        check = session_factory()
        try:
            role = role_service.get_role(check, test_role.id)
            assert role.permissions == sorted([permissions[0].id, permissions[1].id])
            assert role.version == 2
        finally:
            check.close()

    def test_stale_copy_conflicts_without_expected_version(self, session_factory, test_role, permissions):
        first, second = session_factory(), session_factory()
        try:
            role_service.get_role(second, test_role.id)
            role_service.toggle_role_permission(first, test_role.id, permissions[1].id)
            with pytest.raises(Conflict):
                role_service.toggle_role_permission(second, test_role.id, permissions[2].id)
        finally:
            first.close()
            second.close()
