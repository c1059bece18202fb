from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from ticketdesk.database import get_db
from ticketdesk.dependencies import get_tenant_context
from ticketdesk.models.tenant_context import TenantContext
from ticketdesk.schemas.user_schemas import UserCreate, UserResponse, UserRoleUpdate
from ticketdesk.services.user_service import UserService

router = APIRouter()


@router.get("/me", response_model=UserResponse)
async def get_me(context: TenantContext = Depends(get_tenant_context)):
    """
    Get the caller's user record in the current company.

    Signing in to a self-provisioning company creates it on first call.
    """
    return context.user


@router.get("", response_model=list[UserResponse])
async def list_users(
    context: TenantContext = Depends(get_tenant_context),
    db: AsyncSession = Depends(get_db),
):
    """List company users. Customers only see themselves."""
    return await UserService(db).list_users(context)


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def add_user(
    user_data: UserCreate,
    context: TenantContext = Depends(get_tenant_context),
    db: AsyncSession = Depends(get_db),
):
    """
    Add a user to the current company.

    - **Requires ADMIN role**
    - Default role: CUSTOMER
    """
    return await UserService(db).add_user(user_data, context)


@router.patch("/{user_id}/role", response_model=UserResponse)
async def update_user_role(
    user_id: str,
    role_update: UserRoleUpdate,
    context: TenantContext = Depends(get_tenant_context),
    db: AsyncSession = Depends(get_db),
):
    """
    Change a user's role.

    - **Requires ADMIN role**
    - Cannot change your own role
    """
    return await UserService(db).update_role(user_id, role_update, context)


@router.post("/{user_id}/deactivate", response_model=UserResponse)
async def deactivate_user(
    user_id: str,
    context: TenantContext = Depends(get_tenant_context),
    db: AsyncSession = Depends(get_db),
):
    """
    Deactivate a user. Deactivated users can no longer be bound.

    - **Requires ADMIN role**
    - Cannot deactivate yourself
    """
    return await UserService(db).deactivate(user_id, context)
