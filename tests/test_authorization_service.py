from __future__ import annotations

import pytest

from app.core.errors import InfrastructureError
from app.crud.memory import memory_stores
from app.schemas.permissions import PermissionCreate
from app.schemas.roles import RoleCreate
from app.services.authorization_service import AuthorizationService
from app.services.permission_service import PermissionService
from app.services.rbac_service import RBACService
from app.services.role_service import RoleService
from app.services.user_service import UserService


def _grant_editor_publish(stores):
    alice = UserService(stores.users).create(
        email="alice@example.com", password_hash="x", name="Alice"
    )
    editor = RoleService(stores.roles, stores.assignments).create(RoleCreate(role_name="editor"))
    publish = PermissionService(stores.permissions, stores.assignments).create(
        PermissionCreate(permission_name="articles.publish", resource="articles", action="publish")
    )
    rbac = RBACService(stores)
    rbac.assign_permission(editor.id, publish.id)
    rbac.assign_role(alice.id, editor.id)
    return alice, editor, publish


def test_role_grants_permission_end_to_end(stores):
    alice, editor, _publish = _grant_editor_publish(stores)
    evaluator = AuthorizationService(stores.assignments)

    assert evaluator.has_role(alice.id, "editor")
    assert evaluator.has_permission(alice.id, "articles.publish")
    assert evaluator.has_permission(alice.id, "  Articles.Publish ")
    assert not evaluator.has_permission(alice.id, "articles.delete")

    RBACService(stores).revoke_role(alice.id, editor.id)
    assert not evaluator.has_role(alice.id, "editor")
    assert not evaluator.has_permission(alice.id, "articles.publish")


def test_unknown_principal_or_name_is_false(stores):
    _grant_editor_publish(stores)
    evaluator = AuthorizationService(stores.assignments)

    assert evaluator.has_role(999, "editor") is False
    assert evaluator.has_permission(999, "articles.publish") is False
    assert evaluator.has_role(1, "") is False


def test_decisions_distinguish_allow_and_deny(stores):
    alice, _editor, _publish = _grant_editor_publish(stores)
    evaluator = AuthorizationService(stores.assignments)

    allowed = evaluator.decide_permission(alice.id, "articles.publish")
    denied = evaluator.decide_role(alice.id, "admin")

    assert allowed.allowed and not allowed.is_error
    assert not denied.allowed and not denied.is_error


def test_store_failure_raises_instead_of_denying(memory_state):
    stores = memory_stores(memory_state)
    alice, _editor, _publish = _grant_editor_publish(stores)
    evaluator = AuthorizationService(stores.assignments)
    memory_state.unavailable = True

    with pytest.raises(InfrastructureError):
        evaluator.has_permission(alice.id, "articles.publish")

    decision = evaluator.decide_role(alice.id, "editor")
    assert decision.is_error
    assert not decision.allowed
    assert decision.detail
