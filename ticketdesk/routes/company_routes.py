from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from ticketdesk.database import get_db
from ticketdesk.dependencies import get_company, get_site
from ticketdesk.models.company import Company
from ticketdesk.repositories.company_repository import CompanyRepository
from ticketdesk.schemas.company_schemas import CompanyCreate, CompanyResponse, SiteResponse
from ticketdesk.services.company_service import CompanyService
from ticketdesk.tenancy.resolver import SiteResolution

router = APIRouter()


@router.post("", response_model=CompanyResponse, status_code=status.HTTP_201_CREATED)
async def register_company(
    company_data: CompanyCreate,
    db: AsyncSession = Depends(get_db),
):
    """
    Register a new company.

    - Subdomain may contain lowercase letters, numbers and hyphens
    - Reserved and taken subdomains are rejected
    - The company is active immediately with default branding
    """
    service = CompanyService(db)
    return await service.register_company(company_data)


@router.get("/site", response_model=SiteResponse)
async def describe_site(
    site: SiteResolution = Depends(get_site),
    db: AsyncSession = Depends(get_db),
):
    """
    Describe what the current origin addresses.

    Returns the main site, the admin surface, or a tenant with its company.
    An unknown tenant key comes back with company null; use /current to get
    a 404 instead.
    """
    company = None
    if site.is_tenant:
        company = await CompanyRepository(db).get_active_by_subdomain(site.tenant_key)
    return {"kind": site.kind.value, "tenant_key": site.tenant_key, "company": company}


@router.get("/current", response_model=CompanyResponse)
async def get_current_company(company: Company = Depends(get_company)):
    """
    Get the company addressed by the request origin.

    No authentication required; used to brand the sign-in screen.
    """
    return company
