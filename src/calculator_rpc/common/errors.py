"""Errors raised while dispatching or calling binary RPC operations."""


class RpcError(Exception):
    """Base class for every calculator RPC failure."""


class MalformedPayload(RpcError):
    """The request body could not be decoded into the expected message."""


# Name used by the codec contract
DecodeError = MalformedPayload


class EncodeError(RpcError):
    """The reply could not be built or encoded."""


class UnknownOperation(RpcError):
    """The server answered 404 for the requested operation (client side only)."""

    def __init__(self, operation: str):
        super().__init__(f"Unknown operation: {operation!r}")
        self.operation = operation
