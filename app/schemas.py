from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Wire models use camelCase field names; Python code uses snake_case"""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class UserResponse(CamelModel):
    id: int
    open_id: str
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    login_method: Optional[str] = None
    role: str
    created_at: Optional[datetime] = None
    last_signed_in: Optional[datetime] = None


class SuccessResponse(BaseModel):
    success: bool = True


class MessageResponse(BaseModel):
    message: str
