from fastapi import Depends, Header, Query, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from ticketdesk.auth.session import IdentitySession, TokenAuthProvider
from ticketdesk.config import settings
from ticketdesk.core.exceptions import (
    AccessRequiredException,
    ForbiddenException,
    NotFoundException,
    TenantNotFoundException,
    UnauthorizedException,
)
from ticketdesk.database import get_db
from ticketdesk.models.company import Company
from ticketdesk.models.principal import Principal
from ticketdesk.models.tenant_context import TenantContext
from ticketdesk.repositories.company_repository import CompanyRepository
from ticketdesk.services.membership_binder import MembershipBinder
from ticketdesk.tenancy.resolver import SiteKind, SiteResolution, resolve_site

security = HTTPBearer(auto_error=False)


async def get_identity(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> IdentitySession:
    """Identity session for this request, settled from the bearer token."""
    token = credentials.credentials if credentials else None
    provider = TokenAuthProvider(token)
    identity = IdentitySession(provider)
    if provider.rejection is not None:
        raise UnauthorizedException(provider.rejection)
    return identity


async def get_principal(identity: IdentitySession = Depends(get_identity)) -> Principal:
    """
    FastAPI dependency returning the signed-in principal.

    Raises:
        UnauthorizedException: If no bearer token was sent
    """
    if identity.principal is None:
        raise UnauthorizedException("Not authenticated")
    return identity.principal


async def get_site(
    request: Request,
    subdomain: str | None = Query(None, description="Tenant override for development and demos"),
    x_tenant_subdomain: str | None = Header(None),
) -> SiteResolution:
    """Resolve which site the request addresses from its Host header."""
    override = subdomain or x_tenant_subdomain
    return resolve_site(request.headers.get("host"), override)


async def get_company(
    site: SiteResolution = Depends(get_site),
    db: AsyncSession = Depends(get_db),
) -> Company:
    """
    FastAPI dependency returning the active company addressed by the request.

    Raises:
        NotFoundException: If the origin is the main site or admin surface
        TenantNotFoundException: If no active company has the tenant key
    """
    if site.kind != SiteKind.TENANT:
        raise NotFoundException("This origin does not address a company")

    company = await CompanyRepository(db).get_active_by_subdomain(site.tenant_key)
    if company is None:
        raise TenantNotFoundException(site.tenant_key)
    return company


async def get_tenant_context(
    principal: Principal = Depends(get_principal),
    company: Company = Depends(get_company),
    db: AsyncSession = Depends(get_db),
) -> TenantContext:
    """
    FastAPI dependency assembling the authorization context.

    Flow:
    1. Authenticate the principal from the bearer token
    2. Resolve the active company from Host / override
    3. Bind the principal to its user in that company
       (self-provisioning companies create an admin on first visit)

    Raises:
        AccessRequiredException: If the principal is not a member
    """
    user = await MembershipBinder(db).bind(principal, company)
    if user is None:
        raise AccessRequiredException(principal.id)
    return TenantContext(principal=principal, company=company, user=user)


async def require_platform_admin(
    site: SiteResolution = Depends(get_site),
    principal: Principal = Depends(get_principal),
) -> Principal:
    """
    Gate for the cross-tenant administrative surface.

    Raises:
        NotFoundException: If the request is not addressed to the admin site
        ForbiddenException: If the principal is not a platform admin
    """
    if site.kind != SiteKind.ADMIN:
        raise NotFoundException("Administrative surface is only served on the admin site")
    if principal.email.lower() not in settings.platform_admin_emails:
        raise ForbiddenException("Platform administrator access required")
    return principal
