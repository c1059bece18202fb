from datetime import datetime
from pydantic import BaseModel, EmailStr, Field

from ticketdesk.models.role import UserRole


class UserResponse(BaseModel):
    """Tenant user details"""

    id: str
    company_id: str
    email: str
    name: str
    role: UserRole
    avatar_url: str | None
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class UserCreate(BaseModel):
    """Add a user to the current company (ADMIN only)"""

    email: EmailStr
    name: str = Field(..., min_length=1, max_length=255)
    role: UserRole = Field(default=UserRole.CUSTOMER, description="Role to assign (default: CUSTOMER)")


class UserRoleUpdate(BaseModel):
    """Change a user's role (ADMIN only)"""

    role: UserRole = Field(..., description="New role to assign")
