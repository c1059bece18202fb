"""
Identity session over an external auth provider.

The provider pushes AuthState notifications; IdentitySession folds them into
a small state machine and re-publishes changes to its own listeners:

    UNKNOWN --(check completes)--> AUTHENTICATED(principal) | ANONYMOUS
    logout() forces ANONYMOUS immediately.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Protocol

from ticketdesk.core.exceptions import UnauthorizedException
from ticketdesk.core.logging import get_logger
from ticketdesk.core.security import principal_from_token
from ticketdesk.models.principal import Principal

logger = get_logger(__name__)


@dataclass(frozen=True)
class AuthState:
    principal: Principal | None
    is_loading: bool = False


AuthListener = Callable[[AuthState], None]
Unsubscribe = Callable[[], None]


class AuthProvider(Protocol):
    """External authentication collaborator."""

    def on_auth_state_changed(self, callback: AuthListener) -> Unsubscribe: ...

    def login(self) -> None: ...

    def logout(self) -> None: ...


class IdentityStatus(str, Enum):
    UNKNOWN = "unknown"
    AUTHENTICATED = "authenticated"
    ANONYMOUS = "anonymous"


class IdentitySession:
    """Tracks who is signed in, as reported by an AuthProvider."""

    def __init__(self, provider: AuthProvider):
        self._provider = provider
        self._state = AuthState(principal=None, is_loading=True)
        self._listeners: list[AuthListener] = []
        self._unsubscribe: Unsubscribe | None = provider.on_auth_state_changed(self._on_change)

    @property
    def principal(self) -> Principal | None:
        return self._state.principal

    @property
    def is_loading(self) -> bool:
        return self._state.is_loading

    @property
    def status(self) -> IdentityStatus:
        if self._state.is_loading:
            return IdentityStatus.UNKNOWN
        if self._state.principal is None:
            return IdentityStatus.ANONYMOUS
        return IdentityStatus.AUTHENTICATED

    def subscribe(self, listener: AuthListener) -> Unsubscribe:
        """Register a listener for state changes; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def login(self) -> None:
        """Start external sign-in. The outcome arrives as a notification."""
        self._provider.login()

    def logout(self) -> None:
        """End the session and drop to ANONYMOUS without waiting for the provider."""
        self._provider.logout()
        self._set_state(AuthState(principal=None, is_loading=False))

    def close(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self._listeners.clear()

    def _on_change(self, state: AuthState) -> None:
        self._set_state(state)

    def _set_state(self, state: AuthState) -> None:
        if state == self._state:
            return
        self._state = state
        logger.debug(
            "identity_state_changed",
            status=self.status.value,
            principal_id=state.principal.id if state.principal else None,
        )
        for listener in list(self._listeners):
            listener(state)


class TokenAuthProvider:
    """
    AuthProvider for bearer-token callers.

    The token is decoded once; subscribers immediately receive the settled
    state. An invalid token settles as anonymous.
    """

    def __init__(self, token: str | None, secret_key: str | None = None):
        self._token = token
        self._secret_key = secret_key
        self._listeners: list[AuthListener] = []
        self.rejection: str | None = None
        self._state = AuthState(principal=self._decode(), is_loading=False)

    def _decode(self) -> Principal | None:
        if not self._token:
            return None
        try:
            return principal_from_token(self._token, self._secret_key)
        except UnauthorizedException as exc:
            self.rejection = str(exc)
            logger.info("bearer_token_rejected", reason=self.rejection)
            return None

    def on_auth_state_changed(self, callback: AuthListener) -> Unsubscribe:
        self._listeners.append(callback)
        callback(self._state)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def login(self) -> None:
        # Tokens are issued by the identity provider; nothing to start here
        logger.debug("login_requested_for_token_session")

    def logout(self) -> None:
        self._token = None
        self._state = AuthState(principal=None, is_loading=False)
        for listener in list(self._listeners):
            listener(self._state)
