"""Repository for Company model operations."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ticketdesk.models.company import Company
from ticketdesk.repositories.base import store_operation


class CompanyRepository:
    """Repository for Company model operations"""

    def __init__(self, db: AsyncSession):
        self.db = db

    @store_operation("fetch company")
    async def get_by_id(self, company_id: str) -> Company | None:
        """
        Get company by ID.

        Args:
            company_id: Company ID

        Returns:
            Company object or None if not found
        """
        return await self.db.get(Company, company_id)

    @store_operation("fetch company")
    async def get_by_subdomain(self, subdomain: str) -> Company | None:
        """Get company by subdomain regardless of active flag"""
        result = await self.db.execute(
            select(Company).where(Company.subdomain == subdomain.lower()).limit(1)
        )
        return result.scalars().first()

    @store_operation("fetch company")
    async def get_active_by_subdomain(self, subdomain: str) -> Company | None:
        """
        Get an active company by subdomain.

        Deactivated companies are treated as missing.
        """
        result = await self.db.execute(
            select(Company)
            .where(Company.subdomain == subdomain.lower(), Company.is_active.is_(True))
            .limit(1)
        )
        return result.scalars().first()

    @store_operation("list companies")
    async def get_all(self) -> list[Company]:
        """Get all companies, newest first"""
        result = await self.db.execute(select(Company).order_by(Company.created_at.desc()))
        return list(result.scalars().all())

    @store_operation("create company")
    async def create(self, company: Company) -> Company:
        """
        Create a new company.

        Raises:
            IntegrityError: If the subdomain already exists
        """
        self.db.add(company)
        await self.db.commit()
        await self.db.refresh(company)
        return company

    @store_operation("update company")
    async def update(self, company: Company) -> Company:
        """Persist changes to an existing company"""
        await self.db.commit()
        await self.db.refresh(company)
        return company
