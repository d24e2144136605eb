from django.db import DatabaseError
from rest_framework.views import exception_handler as drf_exception_handler
from rest_framework.response import Response
from rest_framework.exceptions import APIException
from rest_framework import exceptions as drf_exceptions
from rest_framework import status
import logging

logger = logging.getLogger("lyfez.api")


# ---- Domain error taxonomy ---------------------------------------------


class DomainError(APIException):
    """
    Base for business-rule violations raised by the services.

    Every subclass carries a stable ``kind`` so clients can branch on it
    without parsing messages. None of these are retryable.
    """
    status_code = status.HTTP_400_BAD_REQUEST
    kind = "error"
    default_detail = "Request could not be processed."
    default_code = "error"


class ValidationError(DomainError):
    status_code = status.HTTP_400_BAD_REQUEST
    kind = "validation_error"
    default_detail = "Invalid input."
    default_code = "validation_error"


class AuthorizationError(DomainError):
    status_code = status.HTTP_403_FORBIDDEN
    kind = "authorization_error"
    default_detail = "You do not have permission to perform this action."
    default_code = "authorization_error"


class NotAMember(AuthorizationError):
    default_detail = "Not a member of this group"


class NotAnAdmin(AuthorizationError):
    default_detail = "Only group admins can perform this action"


class SelfReviewForbidden(AuthorizationError):
    # Surfaced as a bad request on the review endpoint
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Cannot review your own submission"


class ConflictError(DomainError):
    status_code = status.HTTP_400_BAD_REQUEST
    kind = "conflict"
    default_detail = "The request conflicts with the current state."
    default_code = "conflict"


class DuplicateSubmission(ConflictError):
    default_detail = "You have already submitted this activity today"


class AlreadyReviewed(ConflictError):
    default_detail = "You have already reviewed this submission"


class LastAdminRemoval(ConflictError):
    default_detail = "Cannot remove the last admin"


class AlreadyAMember(ConflictError):
    default_detail = "User is already a member"


class NotFoundError(DomainError):
    status_code = status.HTTP_404_NOT_FOUND
    kind = "not_found"
    default_detail = "Not found."
    default_code = "not_found"


class InfrastructureError(DomainError):
    """Storage-layer failure. The only error class a caller may retry."""
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    kind = "infrastructure_error"
    default_detail = "The data store is temporarily unavailable."
    default_code = "infrastructure_error"


# DRF's own exceptions mapped onto the same kinds
DRF_KINDS = {
    drf_exceptions.ValidationError: ValidationError.kind,
    drf_exceptions.ParseError: ValidationError.kind,
    drf_exceptions.NotAuthenticated: AuthorizationError.kind,
    drf_exceptions.AuthenticationFailed: AuthorizationError.kind,
    drf_exceptions.PermissionDenied: AuthorizationError.kind,
    drf_exceptions.NotFound: NotFoundError.kind,
}


def _kind_for(exc) -> str:
    if isinstance(exc, DomainError):
        return exc.kind
    for exc_class, kind in DRF_KINDS.items():
        if isinstance(exc, exc_class):
            return kind
    return "error"


def custom_exception_handler(exc, context):
    """
    Wrap DRF + Django exceptions into a consistent response format.

    Success responses (2xx) are not touched.
    Only errors come through here.
    """
    if isinstance(exc, DatabaseError):
        logger.error("Data store failure: %s", exc, exc_info=exc)
        exc = InfrastructureError()

    response = drf_exception_handler(exc, context)

    # If DRF handled it, wrap it
    if response is not None:
        errors = response.data
        if not isinstance(errors, dict):
            errors = {"detail": errors}
        response.data = {
            "success": False,
            "status_code": response.status_code,
            "kind": _kind_for(exc),
            "errors": errors,
        }
        return response

    # Unhandled exceptions -> 500
    logger.exception("Unhandled API exception", exc_info=exc)

    return Response(
        {
            "success": False,
            "status_code": status.HTTP_500_INTERNAL_SERVER_ERROR,
            "kind": "error",
            "errors": {"detail": "Internal server error."},
        },
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
