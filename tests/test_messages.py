"""Test classes BinaryOperationRequest and BinaryOperationReply."""
from pydantic import ValidationError
import pytest

from calculator_rpc.common.messages import (
    INT64_MAX,
    INT64_MIN,
    BinaryOperationReply,
    BinaryOperationReplyProto,
    BinaryOperationRequest,
    BinaryOperationRequestProto,
)


def test_request_valid() -> None:
    """A request holds exactly its two operands."""
    req = BinaryOperationRequest(operand_a=2, operand_b=3)
    assert req.operand_a == 2
    assert req.operand_b == 3


def test_request_missing_operand() -> None:
    """Both operands are required."""
    with pytest.raises(ValidationError):
        BinaryOperationRequest(operand_a=2)


@pytest.mark.parametrize("value", [INT64_MAX + 1, INT64_MIN - 1])
def test_request_operand_out_of_int64_range(value: int) -> None:
    """Operands must fit in a signed 64-bit integer."""
    with pytest.raises(ValidationError):
        BinaryOperationRequest(operand_a=value, operand_b=0)


def test_request_rejects_fractional_operand() -> None:
    """Operands are integers."""
    with pytest.raises(ValidationError):
        BinaryOperationRequest(operand_a=1.5, operand_b=0)


def test_request_is_frozen() -> None:
    """Messages are not modified after creation."""
    req = BinaryOperationRequest(operand_a=1, operand_b=1)
    with pytest.raises(ValidationError):
        req.operand_a = 5


def test_reply_valid() -> None:
    """A reply holds the result."""
    assert BinaryOperationReply(result=INT64_MIN).result == INT64_MIN


def test_wire_classes_field_numbers() -> None:
    """Wire classes expose the expected protobuf fields."""
    request_fields = {f.name: f.number for f in BinaryOperationRequestProto.DESCRIPTOR.fields}
    reply_fields = {f.name: f.number for f in BinaryOperationReplyProto.DESCRIPTOR.fields}
    assert request_fields == {"operand_a": 1, "operand_b": 2}
    assert reply_fields == {"result": 1}
