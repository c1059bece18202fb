"""Tenant user model binding a principal's email to a role in one company."""

from sqlalchemy import Boolean, Enum, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from ticketdesk.core.ids import new_id
from ticketdesk.models.base import Base, TimestampMixin
from ticketdesk.models.role import UserRole


class User(Base, TimestampMixin):
    """
    Company-scoped user profile carrying the role used for authorization.

    Matched to an authenticated principal by email. Created by a company
    admin, or auto-provisioned as admin on first sign-in to a
    self-provisioning company.

    Constraints:
    - Unique(company_id, email) - one user per email per company
    """

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=lambda: new_id("user"))
    company_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("companies.id", ondelete="CASCADE"),
        nullable=False,
        index=True,  # Critical for multi-tenant queries
    )
    email: Mapped[str] = mapped_column(String(320), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[UserRole] = mapped_column(
        Enum(UserRole, native_enum=False, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
        default=UserRole.CUSTOMER,
    )
    avatar_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    # Constraints
    __table_args__ = (UniqueConstraint("company_id", "email", name="uq_company_user_email"),)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, company_id={self.company_id}, role={self.role.value})>"
