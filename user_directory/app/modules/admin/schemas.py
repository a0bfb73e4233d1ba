from pydantic import BaseModel


class UserStatusUpdate(BaseModel):
    isActive: bool
