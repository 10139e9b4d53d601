# backend/bidding/errors.py
from fastapi import status


class BiddingError(Exception):
    """Base error for domain failures; carries the HTTP status it maps to"""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(BiddingError):
    status_code = status.HTTP_400_BAD_REQUEST


class Unauthenticated(BiddingError):
    status_code = status.HTTP_401_UNAUTHORIZED


class Unauthorized(BiddingError):
    """Credentials were supplied but did not match"""
    status_code = status.HTTP_401_UNAUTHORIZED


class Forbidden(BiddingError):
    status_code = status.HTTP_403_FORBIDDEN


class NotFound(BiddingError):
    status_code = status.HTTP_404_NOT_FOUND


class ServerError(BiddingError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


__all__ = [
    "BiddingError",
    "ValidationError",
    "Unauthenticated",
    "Unauthorized",
    "Forbidden",
    "NotFound",
    "ServerError",
]
