"""HTTP error mapping for use case failures"""

from fastapi import Request, status
from fastapi.responses import JSONResponse

from libs.result import Error


class ClientError(Exception):
    """
    Raised by routes to return a use case Error as a JSON error response

    Rendered as {"error": {"code": ..., "message": ..., "details": ...}}.
    """

    def __init__(self, error: Error, status_code: int = status.HTTP_400_BAD_REQUEST):
        super().__init__(error.message)
        self.error = error
        self.status_code = status_code


async def client_error_handler(request: Request, exc: ClientError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.error.to_dict()})
