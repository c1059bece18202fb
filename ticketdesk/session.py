"""
Long-lived tenant session for interactive clients.

Holds the resolved site, the company, the identity session and the bound
tenant user as one explicit object. Whenever the origin's tenant key or the
signed-in principal changes, the affected values are dropped at once and
reloaded in the background. Every reload carries a generation number and a
result from a superseded generation is discarded, so a user bound under one
company can never surface after the session moved to another.

Methods that start reloads must be called from a running event loop.
"""

import asyncio
from enum import Enum

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ticketdesk.auth.session import AuthState, IdentitySession, IdentityStatus
from ticketdesk.core.exceptions import (
    AccessRequiredException,
    BindingPendingException,
    NotFoundException,
    StoreOperationFailed,
    TenantNotFoundException,
    UnauthorizedException,
)
from ticketdesk.core.logging import get_logger
from ticketdesk.models.company import Company
from ticketdesk.models.principal import Principal
from ticketdesk.models.tenant_context import TenantContext
from ticketdesk.models.user import User
from ticketdesk.repositories.company_repository import CompanyRepository
from ticketdesk.services.membership_binder import MembershipBinder
from ticketdesk.tenancy.resolver import MAIN_SITE, SiteKind, SiteResolution, resolve_site

logger = get_logger(__name__)


class SessionState(str, Enum):
    MAIN_SITE = "main_site"
    ADMIN = "admin"
    LOADING = "loading"
    TENANT_NOT_FOUND = "tenant_not_found"
    SIGNED_OUT = "signed_out"
    ACCESS_REQUIRED = "access_required"
    READY = "ready"


class TenantSession:
    """Per-client context: site, company, principal and bound user."""

    def __init__(
        self,
        identity: IdentitySession,
        session_factory: async_sessionmaker[AsyncSession],
    ):
        self._identity = identity
        self._session_factory = session_factory
        self._site: SiteResolution = MAIN_SITE
        self._principal: Principal | None = identity.principal
        self._company: Company | None = None
        self._company_loading = False
        self._company_missing = False
        self._user: User | None = None
        self._binding = False
        self._generation = 0
        self._tasks: set[asyncio.Task] = set()
        self._closed = False
        self._unsubscribe = identity.subscribe(self._on_identity_change)

    # -- read side -----------------------------------------------------------

    @property
    def site(self) -> SiteResolution:
        return self._site

    @property
    def company(self) -> Company | None:
        return self._company

    @property
    def user(self) -> User | None:
        return self._user

    @property
    def state(self) -> SessionState:
        if self._site.kind == SiteKind.MAIN_SITE:
            return SessionState.MAIN_SITE
        if self._site.kind == SiteKind.ADMIN:
            return SessionState.ADMIN
        if self._company_loading:
            return SessionState.LOADING
        if self._company_missing:
            return SessionState.TENANT_NOT_FOUND
        if self._identity.status == IdentityStatus.UNKNOWN:
            return SessionState.LOADING
        if self._identity.status == IdentityStatus.ANONYMOUS:
            return SessionState.SIGNED_OUT
        if self._binding or self._company is None:
            return SessionState.LOADING
        if self._user is None:
            return SessionState.ACCESS_REQUIRED
        return SessionState.READY

    def context(self) -> TenantContext:
        """
        Return the authorization context, or raise the state's error.

        Raises:
            NotFoundException: Origin addresses the main site or admin surface
            BindingPendingException: Company lookup or binding still running
            TenantNotFoundException: No active company for the tenant key
            UnauthorizedException: Nobody is signed in
            AccessRequiredException: Signed in but not a member of the company
        """
        state = self.state
        if state in (SessionState.MAIN_SITE, SessionState.ADMIN):
            raise NotFoundException("This origin does not address a company")
        if state == SessionState.LOADING:
            raise BindingPendingException("Session is still loading")
        if state == SessionState.TENANT_NOT_FOUND:
            raise TenantNotFoundException(self._site.tenant_key or "")
        if state == SessionState.SIGNED_OUT:
            raise UnauthorizedException("Please sign in to access the ticketing system")
        if state == SessionState.ACCESS_REQUIRED:
            raise AccessRequiredException(self._principal.id)
        return TenantContext(principal=self._principal, company=self._company, user=self._user)

    # -- write side ----------------------------------------------------------

    def set_origin(self, origin: str | None, override: str | None = None) -> None:
        """Re-resolve the site. A changed tenant key drops company and user at once."""
        site = resolve_site(origin, override)
        if site == self._site:
            return
        self._site = site
        self._invalidate(company=True)
        if site.is_tenant:
            self._company_loading = True
            self._spawn(self._load(self._generation))

    def login(self) -> None:
        self._identity.login()

    def logout(self) -> None:
        """
        Sign out; the bound user is cleared before this returns.

        IdentitySession.logout() notifies synchronously, so the identity
        listener performs the invalidation.
        """
        self._identity.logout()

    async def settled(self) -> None:
        """Wait until no lookup started so far is still running."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    def close(self) -> None:
        """Detach from the identity session; in-flight results are discarded."""
        self._closed = True
        self._generation += 1
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    # -- internals -----------------------------------------------------------

    def _invalidate(self, company: bool) -> None:
        self._generation += 1
        self._user = None
        self._binding = False
        if company:
            self._company = None
            self._company_loading = False
            self._company_missing = False

    def _on_identity_change(self, state: AuthState) -> None:
        if state.is_loading or state.principal == self._principal:
            return
        self._principal = state.principal
        self._invalidate(company=False)
        # The running lookup is now stale and will discard its result
        if self._company_loading:
            self._spawn(self._load(self._generation))
            return
        if self._principal is None or self._company is None:
            return
        self._binding = True
        self._spawn(self._bind(self._generation, self._company))

    def _spawn(self, coro) -> None:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    def _is_current(self, generation: int) -> bool:
        return not self._closed and generation == self._generation

    async def _load(self, generation: int) -> None:
        tenant_key = self._site.tenant_key
        try:
            async with self._session_factory() as db:
                company = await CompanyRepository(db).get_active_by_subdomain(tenant_key)
        except StoreOperationFailed as exc:
            logger.error("company_lookup_failed", tenant_key=tenant_key, error=str(exc))
            company = None

        if not self._is_current(generation):
            logger.debug("stale_company_lookup_discarded", tenant_key=tenant_key)
            return

        self._company_loading = False
        if company is None:
            logger.info("tenant_not_found", tenant_key=tenant_key)
            self._company_missing = True
            return

        self._company = company
        if self._principal is not None:
            self._binding = True
            await self._bind(generation, company)

    async def _bind(self, generation: int, company: Company) -> None:
        principal = self._principal
        async with self._session_factory() as db:
            user = await MembershipBinder(db).bind(principal, company)

        if not self._is_current(generation):
            logger.debug(
                "stale_binding_discarded", company_id=company.id, principal_id=principal.id
            )
            return

        self._binding = False
        self._user = user
