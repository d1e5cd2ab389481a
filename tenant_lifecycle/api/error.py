from fastapi import status

from tenant_lifecycle.domain.errors import ErrorKind, kind_of
from tenant_lifecycle.libs.result import Error

KIND_STATUS = {
    ErrorKind.validation: status.HTTP_400_BAD_REQUEST,
    ErrorKind.signature_invalid: status.HTTP_400_BAD_REQUEST,
    ErrorKind.permission_denied: status.HTTP_403_FORBIDDEN,
    ErrorKind.not_found: status.HTTP_404_NOT_FOUND,
    ErrorKind.conflict: status.HTTP_409_CONFLICT,
    ErrorKind.expired: status.HTTP_410_GONE,
}


class ClientError(Exception):
    def __init__(self, base_error: Error, status_code: int = status.HTTP_400_BAD_REQUEST):
        self.base_error = base_error
        self.status_code = status_code
        super().__init__(base_error.message)


class ServerError(Exception):
    def __init__(self, base_error: Error):
        self.base_error = base_error
        super().__init__(base_error.message)


def raise_for_error(error: Error):
    """Raise the HTTP exception matching the error's kind (4xx client, else 5xx)"""
    status_code = KIND_STATUS.get(kind_of(error.code))
    if status_code is None:
        raise ServerError(error)
    raise ClientError(error, status_code=status_code)
