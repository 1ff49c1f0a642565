from __future__ import annotations

from types import SimpleNamespace

import pytest

from userhub.db import RoleEnum
from userhub.services import PasswordService, PermissionService


@pytest.fixture
def permissions() -> PermissionService:
    return PermissionService()


def _requester(user_id: int, role: RoleEnum = RoleEnum.common):
    return SimpleNamespace(id=user_id, role=role.value)


def test_encrypted_password_differs_from_plaintext(password_service: PasswordService):
    encrypted = password_service.encrypt_password("hunter22")

    assert encrypted != "hunter22"
    assert encrypted.startswith("scrypt$")


def test_encryption_is_salted(password_service: PasswordService):
    assert password_service.encrypt_password("hunter22") != password_service.encrypt_password("hunter22")


def test_verify_password(password_service: PasswordService):
    encrypted = password_service.encrypt_password("hunter22")

    assert password_service.verify_password("hunter22", encrypted)
    assert not password_service.verify_password("hunter23", encrypted)


@pytest.mark.parametrize("stored", ["", "plain-text", "scrypt$x$8$1$c2FsdA==$a2V5"])
def test_verify_rejects_malformed_hashes(password_service: PasswordService, stored):
    assert not password_service.verify_password("hunter22", stored)


def test_absent_requester_is_denied(permissions: PermissionService):
    assert not permissions.has_permission(None, 1)


def test_requester_may_access_own_row(permissions: PermissionService):
    assert permissions.has_permission(_requester(7), 7)
    assert permissions.has_permission(_requester(7), "7")


def test_requester_may_not_access_other_rows(permissions: PermissionService):
    assert not permissions.has_permission(_requester(7), 8)


def test_non_numeric_target_is_denied(permissions: PermissionService):
    assert not permissions.has_permission(_requester(7), "seven")
    assert not permissions.has_permission(_requester(7), None)


def test_admin_may_access_any_row(permissions: PermissionService):
    assert permissions.has_permission(_requester(1, RoleEnum.admin), 42)
