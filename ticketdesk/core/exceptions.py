class TicketDeskException(Exception):
    """Base exception for ticket desk"""

    pass


class UnauthorizedException(TicketDeskException):
    """Raised when JWT validation fails or no principal is signed in"""

    pass


class NotFoundException(TicketDeskException):
    """Raised when resource not found"""

    pass


class ForbiddenException(TicketDeskException):
    """Raised when a role lacks permission for an operation"""

    pass


class ValidationException(TicketDeskException):
    """Raised for business logic validation errors"""

    pass


class TenantNotFoundException(NotFoundException):
    """Raised when a tenant key names no active company"""

    def __init__(self, tenant_key: str):
        self.tenant_key = tenant_key
        super().__init__(f"Company '{tenant_key}' not found or deactivated")


class AccessRequiredException(ForbiddenException):
    """
    Raised when a signed-in principal has no user record in the company.

    Terminal state: the principal must be added by a company administrator.
    Carries the principal id so support can locate the identity.
    """

    def __init__(self, principal_id: str):
        self.principal_id = principal_id
        super().__init__(
            "You need to be added to this company to access the ticketing system"
        )


class BindingPendingException(TicketDeskException):
    """Raised when identity or tenant resolution has not completed yet"""

    pass


class StoreOperationFailed(TicketDeskException):
    """Raised when a storage operation fails; the caller may retry"""

    def __init__(self, operation: str, cause: Exception | None = None):
        self.operation = operation
        self.cause = cause
        super().__init__(f"Failed to {operation}. Please try again.")
