from datetime import datetime
from pydantic import BaseModel, Field, field_validator

SUBDOMAIN_PATTERN = r"^[a-z0-9-]+$"


class CompanyCreate(BaseModel):
    """Register a new company (self-service or platform admin)"""

    name: str = Field(..., min_length=1, max_length=255)
    subdomain: str = Field(..., min_length=1, max_length=63)

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Company name is required")
        return value

    @field_validator("subdomain")
    @classmethod
    def normalise_subdomain(cls, value: str) -> str:
        return value.strip().lower()


class CompanyProvision(CompanyCreate):
    """Platform admin provisioning, optionally as a self-provisioning demo"""

    allows_self_provisioning: bool = False
    logo_url: str | None = Field(None, max_length=1024)
    primary_color: str | None = Field(None, max_length=16)


class CompanyResponse(BaseModel):
    """Company details response"""

    id: str
    name: str
    subdomain: str
    logo_url: str | None
    primary_color: str
    is_active: bool
    allows_self_provisioning: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class SiteResponse(BaseModel):
    """What the current origin addresses"""

    kind: str
    tenant_key: str | None
    company: CompanyResponse | None = None
