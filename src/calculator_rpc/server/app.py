"""HTTP transport for the dispatcher."""
from typing import Awaitable, Callable, List, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response

from calculator_rpc.common.errors import EncodeError, MalformedPayload, RpcError
from calculator_rpc.common.logger import logger
from calculator_rpc.common.messages import PROTOBUF_MEDIA_TYPE
from calculator_rpc.server.dispatcher import HTTP_OK, Dispatcher

# Every method is dispatched, routing depends on the path only
DISPATCH_METHODS: List[str] = ["GET", "POST", "PUT", "DELETE", "PATCH", "HEAD", "OPTIONS"]

# Exception class -> (HTTP status, error type)
ERROR_MAPPINGS = {
    MalformedPayload: (400, "malformed_payload"),
    EncodeError: (500, "encode_error"),
}


def _raw_path(request: Request) -> str:
    """Request path as sent by the client, still percent-encoded."""
    raw_path: Optional[bytes] = request.scope.get("raw_path")
    if not raw_path:
        return request.url.path
    # Some clients include the query string in raw_path
    return raw_path.split(b"?", 1)[0].decode("latin-1")


def _error_response(status_code: int, error_type: str, exc: Exception) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": {"type": error_type, "message": str(exc)}},
    )


def create_app(dispatcher: Optional[Dispatcher] = None) -> FastAPI:
    """
    Build the ASGI application serving every path through ``dispatcher``.

    :param Dispatcher dispatcher: Dispatcher to use, a default add/subtract one if omitted

    :return: FastAPI application
    :rtype: FastAPI
    """
    if dispatcher is None:
        dispatcher = Dispatcher()
    # No docs routes: every path belongs to the dispatcher
    app = FastAPI(title="calculator-rpc", docs_url=None, redoc_url=None, openapi_url=None)
    app.state.dispatcher = dispatcher

    @app.api_route("/{operation:path}", methods=DISPATCH_METHODS)
    async def dispatch(request: Request) -> Response:
        # The router sees the decoded path; the dispatcher works on the raw one
        body: bytes = await request.body()
        result = dispatcher.dispatch(_raw_path(request), body)
        media_type = PROTOBUF_MEDIA_TYPE if result.status == HTTP_OK else None
        return Response(content=result.body, status_code=result.status, media_type=media_type)

    def make_handler(
        status_code: int, error_type: str
    ) -> Callable[[Request, RpcError], Awaitable[JSONResponse]]:
        async def handler(request: Request, exc: RpcError) -> JSONResponse:
            log = logger.warning if status_code < 500 else logger.error
            log(f"{request.method} {request.url.path} -> {status_code}: {exc}")
            return _error_response(status_code, error_type, exc)

        return handler

    for exc_class, (status_code, error_type) in ERROR_MAPPINGS.items():
        app.exception_handler(exc_class)(make_handler(status_code, error_type))

    return app
