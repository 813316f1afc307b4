from fastapi import HTTPException, status


class StoreError(Exception):
    """Raised when the document store rejects or fails an operation."""


def internal_error(exc: Exception) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail={"code": "InternalServer", "message": str(exc)}
    )
