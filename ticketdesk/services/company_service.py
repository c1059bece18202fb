import re

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ticketdesk.config import settings
from ticketdesk.core.exceptions import NotFoundException, ValidationException
from ticketdesk.core.logging import get_logger
from ticketdesk.models.company import Company
from ticketdesk.repositories.company_repository import CompanyRepository
from ticketdesk.schemas.company_schemas import SUBDOMAIN_PATTERN, CompanyCreate, CompanyProvision

logger = get_logger(__name__)

_SUBDOMAIN_RE = re.compile(SUBDOMAIN_PATTERN)


class CompanyService:
    """Service layer for company registration and lifecycle"""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.company_repo = CompanyRepository(db)

    def _reserved_subdomains(self) -> set[str]:
        return settings.main_site_subdomains | {settings.ADMIN_SUBDOMAIN.lower()}

    async def register_company(self, company_data: CompanyCreate) -> Company:
        """
        Create a company from the self-service registration form.

        Args:
            company_data: Name and requested subdomain

        Returns:
            Created company, active, with default branding

        Raises:
            ValidationException: If the subdomain is malformed, reserved or taken
        """
        return await self._create(
            name=company_data.name,
            subdomain=company_data.subdomain,
        )

    async def provision_company(self, company_data: CompanyProvision) -> Company:
        """Create a company from the platform admin surface."""
        return await self._create(
            name=company_data.name,
            subdomain=company_data.subdomain,
            allows_self_provisioning=company_data.allows_self_provisioning,
            logo_url=company_data.logo_url,
            primary_color=company_data.primary_color,
        )

    async def _create(
        self,
        name: str,
        subdomain: str,
        allows_self_provisioning: bool = False,
        logo_url: str | None = None,
        primary_color: str | None = None,
    ) -> Company:
        subdomain = subdomain.strip().lower()
        if not _SUBDOMAIN_RE.match(subdomain):
            raise ValidationException(
                "Subdomain can only contain lowercase letters, numbers, and hyphens"
            )
        if subdomain in self._reserved_subdomains():
            raise ValidationException(f"Subdomain '{subdomain}' is reserved")
        if await self.company_repo.get_by_subdomain(subdomain) is not None:
            raise ValidationException("This subdomain is already taken")

        company = Company(
            name=name.strip(),
            subdomain=subdomain,
            logo_url=logo_url,
            primary_color=primary_color or settings.DEFAULT_PRIMARY_COLOR,
            is_active=True,
            allows_self_provisioning=allows_self_provisioning,
        )
        try:
            company = await self.company_repo.create(company)
        except IntegrityError:
            raise ValidationException("This subdomain is already taken")

        logger.info(
            "company_created",
            company_id=company.id,
            subdomain=company.subdomain,
            allows_self_provisioning=company.allows_self_provisioning,
        )
        return company

    async def list_companies(self) -> list[Company]:
        return await self.company_repo.get_all()

    async def set_active(self, company_id: str, is_active: bool) -> Company:
        """
        Activate or deactivate a company. Companies are never deleted.

        Raises:
            NotFoundException: If company not found
        """
        company = await self.company_repo.get_by_id(company_id)
        if company is None:
            raise NotFoundException(f"Company {company_id} not found")
        company.is_active = is_active
        company = await self.company_repo.update(company)
        logger.info("company_active_changed", company_id=company.id, is_active=is_active)
        return company
