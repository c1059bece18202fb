"""
Tenant key resolution from a request origin.

    resolve("acme.platform.com")        -> "acme"
    resolve("platform.com")             -> None   (main site)
    resolve("localhost", "demo")        -> "demo" (override wins)

classify() then separates the main site and the cross-tenant admin surface
from genuine tenant keys. Whether a tenant key names an existing company is
decided later by a store lookup.
"""

from dataclasses import dataclass
from enum import Enum
from urllib.parse import urlsplit

from ticketdesk.config import settings


class SiteKind(str, Enum):
    MAIN_SITE = "main_site"
    ADMIN = "admin"
    TENANT = "tenant"


@dataclass(frozen=True)
class SiteResolution:
    kind: SiteKind
    tenant_key: str | None = None

    @property
    def is_tenant(self) -> bool:
        return self.kind == SiteKind.TENANT


MAIN_SITE = SiteResolution(SiteKind.MAIN_SITE)
ADMIN_SITE = SiteResolution(SiteKind.ADMIN)


def _hostname(origin: str) -> str:
    origin = origin.strip()
    if "://" in origin:
        return (urlsplit(origin).hostname or "").lower()
    # Bare host, optionally with port or path
    host = origin.split("/", 1)[0]
    if host.startswith("["):
        return host.lower()
    return host.split(":", 1)[0].lower()


def resolve(origin: str | None, override: str | None = None) -> str | None:
    """
    Derive the tenant key for an origin.

    Args:
        origin: Host or URL the request came from
        override: Explicit tenant key (development and demo links)

    Returns:
        The tenant key, or None for the platform's main site
    """
    if override:
        return override.strip().lower() or None

    if not origin:
        return None

    hostname = _hostname(origin)
    if hostname in settings.dev_hosts:
        return None

    labels = hostname.split(".")
    if len(labels) > 2 and labels[0]:
        return labels[0]
    return None


def classify(tenant_key: str | None) -> SiteResolution:
    """Map a tenant key to the site it addresses."""
    if tenant_key is None or tenant_key in settings.main_site_subdomains:
        return MAIN_SITE
    if tenant_key == settings.ADMIN_SUBDOMAIN.lower():
        return ADMIN_SITE
    return SiteResolution(SiteKind.TENANT, tenant_key)


def resolve_site(origin: str | None, override: str | None = None) -> SiteResolution:
    return classify(resolve(origin, override))
