from __future__ import annotations

import pytest

from app.core.errors import ConflictError, NotFoundError
from app.schemas.roles import RoleCreate, RoleUpdate
from app.services.role_service import RoleService


def _service(stores) -> RoleService:
    return RoleService(stores.roles, stores.assignments)


def test_create_normalizes_role_name(stores):
    role = _service(stores).create(RoleCreate(role_name=" Admin ", description="Full access"))

    assert role.role_name == "admin"
    assert role.description == "Full access"


def test_create_duplicate_after_normalization_is_conflict(stores):
    service = _service(stores)
    service.create(RoleCreate(role_name=" Admin "))

    with pytest.raises(ConflictError):
        service.create(RoleCreate(role_name="admin"))
    assert [r.role_name for r in service.list()] == ["admin"]


def test_get_by_name_ignores_case_and_whitespace(stores):
    service = _service(stores)
    created = service.create(RoleCreate(role_name="editor"))

    assert service.get_by_name("  EDITOR ").id == created.id
    with pytest.raises(NotFoundError):
        service.get_by_name("viewer")


def test_list_is_ordered_by_name(stores):
    service = _service(stores)
    for name in ("viewer", "admin", "editor"):
        service.create(RoleCreate(role_name=name))

    assert [r.role_name for r in service.list()] == ["admin", "editor", "viewer"]


def test_update_rename_conflict_and_self_rename(stores):
    service = _service(stores)
    editor = service.create(RoleCreate(role_name="editor"))
    service.create(RoleCreate(role_name="viewer"))

    with pytest.raises(ConflictError):
        service.update(editor.id, RoleUpdate(role_name="Viewer"))

    updated = service.update(editor.id, RoleUpdate(role_name="EDITOR", description="Edits"))
    assert updated.role_name == "editor"
    assert updated.description == "Edits"


def test_update_and_delete_missing_role_is_not_found(stores):
    service = _service(stores)

    with pytest.raises(NotFoundError):
        service.update(42, RoleUpdate(description="x"))
    with pytest.raises(NotFoundError):
        service.delete(42)
