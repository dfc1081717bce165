"""Route a request path to a calculator operation and run it on a binary payload."""
from typing import Callable, Dict, NamedTuple, Optional
from urllib.parse import unquote

from pydantic import BaseModel, ConfigDict, Field

from calculator_rpc.common.codec import REPLY_CODEC, REQUEST_CODEC, MessageCodec
from calculator_rpc.common.logger import logger
from calculator_rpc.server.calculator import Calculator

HTTP_OK = 200
HTTP_NOT_FOUND = 404


class Operation(BaseModel):
    """One dispatchable operation: how to read its request, what to run, how to write its reply."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    request_codec: MessageCodec = Field(..., description="Codec for the request body")
    handler: Callable[[BaseModel], BaseModel] = Field(..., description="Business operation")
    reply_codec: MessageCodec = Field(..., description="Codec for the reply body")


class DispatchResult(NamedTuple):
    """Status and body handed back to the transport."""

    status: int
    body: bytes = b""


def normalize_path(path: str) -> str:
    """
    Turn a request path into an operation name.

    Percent-escapes are decoded first, then leading ``/`` are stripped,
    so ``/add``, ``//add`` and ``/%61dd`` all name ``add``.

    :param str path: Request path, without query string

    :return: Operation name
    :rtype: str
    """
    return unquote(path).lstrip("/")


def default_operations(calculator: Optional[Calculator] = None) -> Dict[str, Operation]:
    """Build the ``add`` / ``subtract`` operation table."""
    calculator = calculator or Calculator()
    return {
        "add": Operation(request_codec=REQUEST_CODEC, handler=calculator.add, reply_codec=REPLY_CODEC),
        "subtract": Operation(
            request_codec=REQUEST_CODEC, handler=calculator.subtract, reply_codec=REPLY_CODEC
        ),
    }


class Dispatcher(BaseModel):
    """
    Stateless request dispatcher.

    Pipeline for a known operation:
        1. Decode the body with the operation's request codec.
        2. Call the handler with the decoded message.
        3. Encode the reply with the operation's reply codec.

    Unknown operation names are not errors: they produce a 404 with an empty body.
    Decode failures raise MalformedPayload before the handler runs; reply failures raise EncodeError.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    operations: Dict[str, Operation] = Field(
        default_factory=default_operations, description="Operation name to operation"
    )

    def register(self, name: str, operation: Operation) -> None:
        """Add or replace the operation served under ``name``."""
        self.operations[name] = operation

    def dispatch(self, path: str, body: bytes) -> DispatchResult:
        """
        Run the operation named by ``path`` on ``body``.

        :param str path: Request path (percent-encoded, without query string)
        :param bytes body: Raw request body

        :return: Status and encoded reply
        :rtype: DispatchResult
        :raises MalformedPayload: If the body cannot be decoded
        :raises EncodeError: If the reply cannot be encoded
        """
        name: str = normalize_path(path)
        operation = self.operations.get(name)
        if operation is None:
            logger.debug(f"No operation named {name!r}")
            return DispatchResult(status=HTTP_NOT_FOUND)

        request = operation.request_codec.decode(body)
        reply = operation.handler(request)
        payload: bytes = operation.reply_codec.encode(reply)

        logger.debug(f"{name}: {len(body)} bytes in, {len(payload)} bytes out")
        return DispatchResult(status=HTTP_OK, body=payload)
