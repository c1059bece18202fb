from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from ticketdesk.config import settings
from ticketdesk.database import get_db
from ticketdesk.dependencies import require_platform_admin
from ticketdesk.models.principal import Principal
from ticketdesk.repositories.ticket_repository import TicketRepository
from ticketdesk.repositories.user_repository import UserRepository
from ticketdesk.schemas.company_schemas import CompanyProvision, CompanyResponse
from ticketdesk.schemas.ticket_schemas import TicketResponse
from ticketdesk.schemas.user_schemas import UserResponse
from ticketdesk.services.company_service import CompanyService

router = APIRouter()


@router.get("/companies", response_model=list[CompanyResponse])
async def list_companies(
    admin: Principal = Depends(require_platform_admin),
    db: AsyncSession = Depends(get_db),
):
    """List every company, newest first."""
    return await CompanyService(db).list_companies()


@router.post("/companies", response_model=CompanyResponse, status_code=status.HTTP_201_CREATED)
async def provision_company(
    company_data: CompanyProvision,
    admin: Principal = Depends(require_platform_admin),
    db: AsyncSession = Depends(get_db),
):
    """
    Provision a company.

    - Set **allows_self_provisioning** to create a demo company where any
      signed-in visitor becomes an admin
    """
    return await CompanyService(db).provision_company(company_data)


@router.post("/companies/{company_id}/deactivate", response_model=CompanyResponse)
async def deactivate_company(
    company_id: str,
    admin: Principal = Depends(require_platform_admin),
    db: AsyncSession = Depends(get_db),
):
    """Deactivate a company. Its subdomain then resolves as not found."""
    return await CompanyService(db).set_active(company_id, False)


@router.post("/companies/{company_id}/activate", response_model=CompanyResponse)
async def activate_company(
    company_id: str,
    admin: Principal = Depends(require_platform_admin),
    db: AsyncSession = Depends(get_db),
):
    """Reactivate a previously deactivated company."""
    return await CompanyService(db).set_active(company_id, True)


@router.get("/users", response_model=list[UserResponse])
async def list_all_users(
    admin: Principal = Depends(require_platform_admin),
    db: AsyncSession = Depends(get_db),
):
    """List users across every company."""
    return await UserRepository(db).get_all()


@router.get("/tickets", response_model=list[TicketResponse])
async def list_latest_tickets(
    admin: Principal = Depends(require_platform_admin),
    db: AsyncSession = Depends(get_db),
):
    """Latest tickets across every company."""
    return await TicketRepository(db).get_latest(settings.ADMIN_TICKET_LIMIT)
