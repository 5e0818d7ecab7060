from autoresponder.services.errors import (
    CompletionError,
    ConflictError,
    ForbiddenError,
    InvalidTokenError,
    ServiceError,
    UnauthenticatedError,
    UnknownAccountError,
    ValidationError,
)
from autoresponder.services.plans import Capability, Plan, authorize, plans_for
from autoresponder.services.router_service import route
