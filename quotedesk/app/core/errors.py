"""Domain exceptions raised by services; main.py maps them to HTTP responses."""

from fastapi import status


class QuoteDeskError(Exception):
    """Base class for all service-level failures."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class InvalidInputError(QuoteDeskError):
    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(QuoteDeskError):
    status_code = status.HTTP_404_NOT_FOUND


class PersistenceError(QuoteDeskError):
    status_code = status.HTTP_409_CONFLICT


class ExportError(QuoteDeskError):
    status_code = status.HTTP_502_BAD_GATEWAY
