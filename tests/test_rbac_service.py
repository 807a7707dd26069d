from __future__ import annotations

import pytest

from app.core.errors import NotFoundError
from app.schemas.permissions import PermissionCreate
from app.schemas.roles import RoleCreate
from app.services.permission_service import PermissionService
from app.services.rbac_service import RBACService
from app.services.role_service import RoleService
from app.services.user_service import UserService


def _user(stores, email: str, name: str):
    return UserService(stores.users).create(email=email, password_hash="x", name=name)


def _role(stores, name: str):
    return RoleService(stores.roles, stores.assignments).create(RoleCreate(role_name=name))


def _permission(stores, name: str):
    resource, action = name.split(".")
    return PermissionService(stores.permissions, stores.assignments).create(
        PermissionCreate(permission_name=name, resource=resource, action=action)
    )


def test_assign_role_twice_keeps_a_single_edge(stores):
    rbac = RBACService(stores)
    alice = _user(stores, "alice@example.com", "Alice")
    editor = _role(stores, "editor")

    rbac.assign_role(alice.id, editor.id)
    rbac.assign_role(alice.id, editor.id)

    assert [r.role_name for r in rbac.roles_of(alice.id)] == ["editor"]


def test_assign_to_missing_role_is_not_found_and_adds_nothing(stores):
    rbac = RBACService(stores)
    alice = _user(stores, "alice@example.com", "Alice")

    with pytest.raises(NotFoundError) as exc_info:
        rbac.assign_role(alice.id, 999)
    assert exc_info.value.message == "role not found"
    assert rbac.roles_of(alice.id) == []


def test_assign_permission_checks_both_ends(stores):
    rbac = RBACService(stores)
    editor = _role(stores, "editor")
    publish = _permission(stores, "articles.publish")

    with pytest.raises(NotFoundError):
        rbac.assign_permission(999, publish.id)
    with pytest.raises(NotFoundError):
        rbac.assign_permission(editor.id, 999)
    assert rbac.permissions_of_role(editor.id) == []


def test_revoke_missing_edge_is_not_found(stores):
    rbac = RBACService(stores)
    alice = _user(stores, "alice@example.com", "Alice")
    editor = _role(stores, "editor")
    publish = _permission(stores, "articles.publish")

    with pytest.raises(NotFoundError):
        rbac.revoke_role(alice.id, editor.id)
    with pytest.raises(NotFoundError):
        rbac.revoke_permission(editor.id, publish.id)


def test_revoke_role_removes_the_edge(stores):
    rbac = RBACService(stores)
    alice = _user(stores, "alice@example.com", "Alice")
    editor = _role(stores, "editor")
    rbac.assign_role(alice.id, editor.id)

    rbac.revoke_role(alice.id, editor.id)

    assert rbac.roles_of(alice.id) == []
    with pytest.raises(NotFoundError):
        rbac.revoke_role(alice.id, editor.id)


def test_effective_permissions_are_a_deduplicated_union(stores):
    rbac = RBACService(stores)
    alice = _user(stores, "alice@example.com", "Alice")
    editor = _role(stores, "editor")
    reviewer = _role(stores, "reviewer")
    edit = _permission(stores, "articles.edit")
    publish = _permission(stores, "articles.publish")
    comment = _permission(stores, "comments.create")

    rbac.assign_permission(editor.id, edit.id)
    rbac.assign_permission(editor.id, publish.id)
    rbac.assign_permission(reviewer.id, publish.id)
    rbac.assign_permission(reviewer.id, comment.id)
    rbac.assign_role(alice.id, editor.id)
    rbac.assign_role(alice.id, reviewer.id)

    names = [p.permission_name for p in rbac.permissions_of_user(alice.id)]
    assert names == ["articles.edit", "articles.publish", "comments.create"]


def test_deleting_a_role_removes_its_edges(stores):
    rbac = RBACService(stores)
    roles = RoleService(stores.roles, stores.assignments)
    permissions = PermissionService(stores.permissions, stores.assignments)
    alice = _user(stores, "alice@example.com", "Alice")
    editor = _role(stores, "editor")
    publish = _permission(stores, "articles.publish")
    rbac.assign_permission(editor.id, publish.id)
    rbac.assign_role(alice.id, editor.id)

    roles.delete(editor.id)

    assert rbac.roles_of(alice.id) == []
    assert rbac.permissions_of_user(alice.id) == []
    assert permissions.roles_of_permission(publish.id) == []
    with pytest.raises(NotFoundError):
        rbac.permissions_of_role(editor.id)


def test_deleting_a_permission_removes_its_grants(stores):
    rbac = RBACService(stores)
    alice = _user(stores, "alice@example.com", "Alice")
    editor = _role(stores, "editor")
    publish = _permission(stores, "articles.publish")
    rbac.assign_permission(editor.id, publish.id)
    rbac.assign_role(alice.id, editor.id)

    PermissionService(stores.permissions, stores.assignments).delete(publish.id)

    assert rbac.permissions_of_role(editor.id) == []
    assert [r.role_name for r in rbac.roles_of(alice.id)] == ["editor"]


def test_deleting_a_user_removes_its_memberships(stores):
    rbac = RBACService(stores)
    alice = _user(stores, "alice@example.com", "Alice")
    editor = _role(stores, "editor")
    rbac.assign_role(alice.id, editor.id)

    UserService(stores.users).delete(alice.id)

    assert rbac.users_of_role(editor.id) == []


def test_users_of_role_are_sorted_by_name_and_carry_no_hash(stores):
    rbac = RBACService(stores)
    editor = _role(stores, "editor")
    for email, name in (("zed@example.com", "Zed"), ("amy@example.com", "Amy")):
        rbac.assign_role(_user(stores, email, name).id, editor.id)

    users = rbac.users_of_role(editor.id)

    assert [u.name for u in users] == ["Amy", "Zed"]
    assert "password_hash" not in users[0].model_dump()


def test_user_with_permissions_composes_profile_and_grants(stores):
    rbac = RBACService(stores)
    alice = _user(stores, "alice@example.com", "Alice")
    editor = _role(stores, "editor")
    publish = _permission(stores, "articles.publish")
    rbac.assign_permission(editor.id, publish.id)
    rbac.assign_role(alice.id, editor.id)

    with_roles = rbac.user_with_roles(alice.id)
    with_permissions = rbac.user_with_permissions(alice.id)

    assert with_roles.email == "alice@example.com"
    assert [r.role_name for r in with_roles.roles] == ["editor"]
    assert [p.permission_name for p in with_permissions.permissions] == ["articles.publish"]


def test_queries_for_missing_entities_are_not_found(stores):
    rbac = RBACService(stores)

    with pytest.raises(NotFoundError):
        rbac.roles_of(404)
    with pytest.raises(NotFoundError):
        rbac.permissions_of_user(404)
    with pytest.raises(NotFoundError):
        rbac.permissions_of_role(404)
    with pytest.raises(NotFoundError):
        rbac.users_of_role(404)


def test_default_role_is_granted_when_defined(stores):
    rbac = RBACService(stores)
    alice = _user(stores, "alice@example.com", "Alice")

    assert rbac.assign_default_role(alice.id, "user") is False
    assert rbac.roles_of(alice.id) == []

    _role(stores, "user")
    assert rbac.assign_default_role(alice.id, " User ") is True
    assert rbac.assign_default_role(alice.id, "user") is True
    assert [r.role_name for r in rbac.roles_of(alice.id)] == ["user"]

    assert rbac.assign_default_role(alice.id, "") is False
