from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ticketdesk.config import settings
from ticketdesk.core.exceptions import (
    AccessRequiredException,
    BindingPendingException,
    ForbiddenException,
    NotFoundException,
    StoreOperationFailed,
    TenantNotFoundException,
    UnauthorizedException,
    ValidationException,
)
from ticketdesk.core.logging import get_logger, setup_logging
from ticketdesk.routes import admin_routes, company_routes, ticket_routes, user_routes

setup_logging()
logger = get_logger(__name__)

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    docs_url="/docs" if settings.DEBUG else None,  # Disable in production
    redoc_url="/redoc" if settings.DEBUG else None,
)

# CORS middleware
cors_origins = settings.cors_origins_list
if cors_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )


# Exception handlers
@app.exception_handler(UnauthorizedException)
async def unauthorized_exception_handler(request: Request, exc: UnauthorizedException):
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content={"detail": str(exc)},
        headers={"WWW-Authenticate": "Bearer"},
    )


@app.exception_handler(NotFoundException)
async def not_found_exception_handler(request: Request, exc: NotFoundException):
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})


@app.exception_handler(TenantNotFoundException)
async def tenant_not_found_exception_handler(request: Request, exc: TenantNotFoundException):
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"detail": str(exc), "code": "tenant_not_found", "tenant_key": exc.tenant_key},
    )


@app.exception_handler(ForbiddenException)
async def forbidden_exception_handler(request: Request, exc: ForbiddenException):
    return JSONResponse(status_code=status.HTTP_403_FORBIDDEN, content={"detail": str(exc)})


@app.exception_handler(AccessRequiredException)
async def access_required_exception_handler(request: Request, exc: AccessRequiredException):
    return JSONResponse(
        status_code=status.HTTP_403_FORBIDDEN,
        content={"detail": str(exc), "code": "access_required", "principal_id": exc.principal_id},
    )


@app.exception_handler(ValidationException)
async def validation_exception_handler(request: Request, exc: ValidationException):
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)})


@app.exception_handler(BindingPendingException)
async def binding_pending_exception_handler(request: Request, exc: BindingPendingException):
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": str(exc), "code": "binding_pending"},
        headers={"Retry-After": "1"},
    )


@app.exception_handler(StoreOperationFailed)
async def store_failure_exception_handler(request: Request, exc: StoreOperationFailed):
    logger.error("store_operation_failed", path=request.url.path, operation=exc.operation)
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": str(exc), "code": "store_unavailable", "retryable": True},
    )


# Health check endpoint
@app.get("/health")
async def health_check():
    return {"status": "healthy", "version": settings.APP_VERSION}


# Root endpoint
@app.get("/")
async def root():
    return {
        "message": "TicketDesk API",
        "version": settings.APP_VERSION,
        "docs": "/docs" if settings.DEBUG else "Documentation disabled in production",
    }


# Include routers
app.include_router(company_routes.router, prefix="/api/companies", tags=["Companies"])
app.include_router(admin_routes.router, prefix="/api/admin", tags=["Platform Admin"])
app.include_router(user_routes.router, prefix="/api/users", tags=["Users"])
app.include_router(ticket_routes.router, prefix="/api/tickets", tags=["Tickets"])
app.include_router(ticket_routes.dashboard_router, prefix="/api/dashboard", tags=["Dashboard"])
