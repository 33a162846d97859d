from django.conf import settings
from django.core.exceptions import ValidationError
from django.http import HttpRequest
from ninja_extra import NinjaExtraAPI
from ninja_jwt.controller import NinjaJWTDefaultController

from accounts.controllers.roles import RoleController
from assistant.controllers import AssistantController
from assistant.exceptions import ExternalServiceError
from common.schema import ResponseOk, VersionResponse
from common.throttling import AnonDefaultThrottle, UserDefaultThrottle
from events.controllers import EVENT_CONTROLLERS
from events.exceptions import AuthorizationError, ConflictError, PreconditionError, TokenInvalidError
from notifications.controllers.notification_controller import NotificationController

from .exception_handlers import (
    handle_authorization_error,
    handle_conflict_error,
    handle_django_validation_error,
    handle_external_service_error,
    handle_general_exception,
    handle_precondition_error,
    handle_token_invalid_error,
)

api = NinjaExtraAPI(
    title="ClubHub Backend API",
    docs_url="/docs",
    version=settings.VERSION,
    description=f"ClubHub API {settings.VERSION}",
    app_name=f"clubhub-api-{settings.VERSION}",
    urls_namespace="api",
    servers=[
        {"url": settings.SERVICE_URL, "description": settings.SERVICE_DESCRIPTION},
    ],
    throttle=[AnonDefaultThrottle(), UserDefaultThrottle()],
)


@api.get("/version", tags=["Version"], response={200: VersionResponse})
def version(request: HttpRequest) -> tuple[int, VersionResponse]:
    """Deployed release, read from the VERSION setting."""
    return 200, VersionResponse(version=settings.VERSION)


@api.get("/healthcheck", tags=["Healthcheck"], response={200: ResponseOk})
def healthcheck(request: HttpRequest) -> tuple[int, ResponseOk]:
    """Liveness probe; touches neither the database nor the broker."""
    return 200, ResponseOk()


api.register_controllers(
    # Auth controllers
    NinjaJWTDefaultController,
    RoleController,
    # Event controllers
    *EVENT_CONTROLLERS,
    # Notification controllers
    NotificationController,
    # Assistant controllers
    AssistantController,
)

EXCEPTION_HANDLERS = {
    Exception: handle_general_exception,
    ValidationError: handle_django_validation_error,
    AuthorizationError: handle_authorization_error,
    ConflictError: handle_conflict_error,
    PreconditionError: handle_precondition_error,
    TokenInvalidError: handle_token_invalid_error,
    ExternalServiceError: handle_external_service_error,
}

for exc, handler in EXCEPTION_HANDLERS.items():
    api.add_exception_handler(exc, handler)
