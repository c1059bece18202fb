"""Company model: the tenant isolation boundary."""

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column

from ticketdesk.core.ids import new_id
from ticketdesk.models.base import Base, TimestampMixin


class Company(Base, TimestampMixin):
    """
    Multi-tenant isolation boundary, addressed by subdomain.

    Every user and ticket belongs to exactly one company. Companies are
    deactivated rather than deleted, and the subdomain never changes once
    created.

    allows_self_provisioning marks a demo company: any principal signing
    in is provisioned as an admin user on first visit.
    """

    __tablename__ = "companies"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=lambda: new_id("company"))
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    subdomain: Mapped[str] = mapped_column(String(63), unique=True, nullable=False, index=True)
    logo_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    primary_color: Mapped[str] = mapped_column(String(16), nullable=False, default="#2563EB")
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    allows_self_provisioning: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    def __repr__(self) -> str:
        return f"<Company(id={self.id}, subdomain='{self.subdomain}')>"
