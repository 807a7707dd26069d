from __future__ import annotations

import pytest

from app.core.errors import ConflictError, NotFoundError
from app.schemas.permissions import PermissionCreate, PermissionUpdate
from app.services.permission_service import PermissionService


def _service(stores) -> PermissionService:
    return PermissionService(stores.permissions, stores.assignments)


def _create(service: PermissionService, name: str, resource: str, action: str):
    return service.create(
        PermissionCreate(permission_name=name, resource=resource, action=action)
    )


def test_create_normalizes_all_keys(stores):
    permission = _create(_service(stores), " Articles.Publish ", "Articles", " PUBLISH")

    assert permission.permission_name == "articles.publish"
    assert permission.resource == "articles"
    assert permission.action == "publish"


def test_duplicate_name_is_conflict(stores):
    service = _service(stores)
    _create(service, "articles.publish", "articles", "publish")

    with pytest.raises(ConflictError) as exc_info:
        _create(service, "ARTICLES.PUBLISH", "posts", "publish")
    assert "name" in exc_info.value.message


def test_duplicate_resource_action_pair_is_conflict(stores):
    service = _service(stores)
    _create(service, "articles.publish", "articles", "publish")

    with pytest.raises(ConflictError) as exc_info:
        _create(service, "articles.release", "articles", "publish")
    assert "resource and action" in exc_info.value.message
    assert len(service.list()) == 1


def test_list_is_ordered_by_resource_then_action(stores):
    service = _service(stores)
    _create(service, "users.read", "users", "read")
    _create(service, "articles.publish", "articles", "publish")
    _create(service, "articles.edit", "articles", "edit")

    assert [p.permission_name for p in service.list()] == [
        "articles.edit",
        "articles.publish",
        "users.read",
    ]


def test_update_checks_the_resulting_pair(stores):
    service = _service(stores)
    _create(service, "articles.publish", "articles", "publish")
    edit = _create(service, "articles.edit", "articles", "edit")

    # only the action changes, but the merged pair collides
    with pytest.raises(ConflictError):
        service.update(edit.id, PermissionUpdate(action="publish"))

    updated = service.update(edit.id, PermissionUpdate(description="Edit articles"))
    assert updated.description == "Edit articles"
    assert updated.action == "edit"


def test_get_missing_permission_is_not_found(stores):
    service = _service(stores)

    with pytest.raises(NotFoundError):
        service.get(7)
    with pytest.raises(NotFoundError):
        service.get_by_name("nothing.here")
    with pytest.raises(NotFoundError):
        service.roles_of_permission(7)
