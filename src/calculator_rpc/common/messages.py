"""
Calculator messages.

Each message exists twice:
    - a pydantic model, the typed value handlers work with
    - a protobuf class, the wire representation the codec serialises through

The protobuf classes are built at import time from a descriptor equivalent to::

    syntax = "proto3";
    package calculator_rpc;

    message BinaryOperationRequest {
        int64 operand_a = 1;
        int64 operand_b = 2;
    }

    message BinaryOperationReply {
        int64 result = 1;
    }
"""
from typing import Annotated

from google.protobuf import descriptor_pb2, descriptor_pool, message_factory
from pydantic import BaseModel, ConfigDict, Field

PROTO_PACKAGE = "calculator_rpc"
PROTOBUF_MEDIA_TYPE = "application/x-protobuf"

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

# Signed 64-bit integer, the width of every numeric field on the wire
Int64 = Annotated[int, Field(ge=INT64_MIN, le=INT64_MAX)]


class BinaryOperationRequest(BaseModel):
    """The two operands of an arithmetic operation."""

    model_config = ConfigDict(frozen=True)

    operand_a: Int64 = Field(..., description="Left-hand operand")
    operand_b: Int64 = Field(..., description="Right-hand operand")


class BinaryOperationReply(BaseModel):
    """The result of an arithmetic operation."""

    model_config = ConfigDict(frozen=True)

    result: Int64 = Field(..., description="Computed result")


def _build_file_descriptor() -> descriptor_pb2.FileDescriptorProto:
    field = descriptor_pb2.FieldDescriptorProto
    file_proto = descriptor_pb2.FileDescriptorProto(
        name=f"{PROTO_PACKAGE}/calculator.proto",
        package=PROTO_PACKAGE,
        syntax="proto3",
    )

    request = file_proto.message_type.add(name="BinaryOperationRequest")
    request.field.add(name="operand_a", number=1, type=field.TYPE_INT64, label=field.LABEL_OPTIONAL)
    request.field.add(name="operand_b", number=2, type=field.TYPE_INT64, label=field.LABEL_OPTIONAL)

    reply = file_proto.message_type.add(name="BinaryOperationReply")
    reply.field.add(name="result", number=1, type=field.TYPE_INT64, label=field.LABEL_OPTIONAL)

    return file_proto


# Private pool so the definitions never clash with the default one
_pool = descriptor_pool.DescriptorPool()
_pool.AddSerializedFile(_build_file_descriptor().SerializeToString())

BinaryOperationRequestProto = message_factory.GetMessageClass(
    _pool.FindMessageTypeByName(f"{PROTO_PACKAGE}.BinaryOperationRequest")
)
BinaryOperationReplyProto = message_factory.GetMessageClass(
    _pool.FindMessageTypeByName(f"{PROTO_PACKAGE}.BinaryOperationReply")
)
