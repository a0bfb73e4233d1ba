from __future__ import annotations

import logging

from fastapi import APIRouter

from user_directory.app.core.auth import AccountServiceDep
from user_directory.app.core.authz import AdminOnly
from user_directory.app.modules.admin.schemas import UserStatusUpdate

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/users")
def list_users(_: AdminOnly, service: AccountServiceDep):
    return {"success": True, "users": service.list_users()}


@router.put("/users/{user_id}/status")
def update_user_status(
    user_id: str,
    payload: UserStatusUpdate,
    admin: AdminOnly,
    service: AccountServiceDep,
):
    user = service.set_user_active(user_id, payload.isActive)
    if admin:
        logger.info("Admin %s set user %s isActive=%s", admin.get("email"), user_id, payload.isActive)
    return {"success": True, "message": "User status updated", "user": user}


@router.delete("/users/{user_id}")
def delete_user(user_id: str, admin: AdminOnly, service: AccountServiceDep):
    user = service.delete_user(user_id)
    if admin:
        logger.info("Admin %s deleted user %s", admin.get("email"), user_id)
    return {"success": True, "message": "User deleted successfully", "user": user}
