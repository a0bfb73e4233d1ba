from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter

from user_directory.app.core.auth import AccountServiceDep
from user_directory.app.modules.auth.schemas import LoginRequest, ProfileUpdateRequest, RegisterRequest

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/register", status_code=201)
def register(payload: RegisterRequest, service: AccountServiceDep):
    user = service.register(payload.email, payload.password, payload.profile())
    return {"success": True, "message": "User registered successfully", "user": user}


@router.post("/login")
def login(credentials: LoginRequest, service: AccountServiceDep):
    user, is_admin = service.authenticate(credentials.email, credentials.password)
    return {
        "success": True,
        "message": "Admin login successful" if is_admin else "Login successful",
        "user": user,
        "isAdmin": is_admin,
    }


@router.get("/profile")
def get_profile(service: AccountServiceDep, email: Optional[str] = None):
    return {"success": True, "user": service.get_profile(email)}


@router.put("/profile")
def update_profile(payload: ProfileUpdateRequest, service: AccountServiceDep):
    user = service.update_profile(payload.email, payload.updates)
    return {"success": True, "message": "Profile updated successfully", "user": user}
