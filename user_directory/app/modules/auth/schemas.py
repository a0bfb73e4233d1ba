from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict


class NameParts(BaseModel):
    first: Optional[str] = None
    last: Optional[str] = None


class RegisterRequest(BaseModel):
    """Registration payload; everything except email/password falls back to defaults."""
    email: Optional[str] = None
    password: Optional[str] = None
    name: Optional[Union[NameParts, str]] = None
    company: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    age: Optional[int] = None
    eyeColor: Optional[str] = None
    balance: Optional[str] = None
    picture: Optional[str] = None
    picturePublicId: Optional[str] = None

    def profile(self) -> Dict[str, Any]:
        return self.model_dump(exclude={"email", "password"}, exclude_none=True)


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class ProfileUpdateRequest(BaseModel):
    """`updates` is merged shallowly into the stored record."""
    model_config = ConfigDict(extra="ignore")

    email: Optional[str] = None
    updates: Optional[Dict[str, Any]] = None
