"""Arithmetic operations exposed over RPC."""
from pydantic import ValidationError

from calculator_rpc.common.errors import EncodeError
from calculator_rpc.common.messages import BinaryOperationReply, BinaryOperationRequest


class Calculator:
    """Stateless calculator; every method maps one request message to one reply message."""

    @staticmethod
    def _reply(value: int) -> BinaryOperationReply:
        try:
            return BinaryOperationReply(result=value)
        except ValidationError as exc:
            raise EncodeError(f"Result {value} does not fit in a signed 64-bit integer") from exc

    def add(self, request: BinaryOperationRequest) -> BinaryOperationReply:
        """Return ``operand_a + operand_b``."""
        return self._reply(request.operand_a + request.operand_b)

    def subtract(self, request: BinaryOperationRequest) -> BinaryOperationReply:
        """Return ``operand_a - operand_b``."""
        return self._reply(request.operand_a - request.operand_b)
