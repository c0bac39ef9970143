"""Domain errors raised by service functions and translated to HTTP responses by views"""
from rest_framework import status
from rest_framework.response import Response


class DomainError(Exception):
    """A business rule refused the operation"""
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message):
        super().__init__(message)
        self.message = message


class ConflictError(DomainError):
    """The target record is no longer in a state that allows the operation"""
    status_code = status.HTTP_409_CONFLICT


class InvalidTransitionError(DomainError):
    pass


class AIServiceError(DomainError):
    """The generative AI service failed or returned unusable output"""
    status_code = status.HTTP_502_BAD_GATEWAY


def error_response(exc):
    """Build the ``{'error': ...}`` response used across the API"""
    payload = {'error': exc.message}
    if isinstance(exc, AIServiceError):
        payload['data'] = None
    return Response(payload, status=exc.status_code)
