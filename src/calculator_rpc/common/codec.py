"""Conversion between calculator messages and their protobuf wire bytes."""
from typing import Any, Dict, Type

from google.protobuf.message import DecodeError as ProtobufDecodeError
from google.protobuf.message import Message
from google.protobuf.unknown_fields import UnknownFieldSet
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from calculator_rpc.common.errors import EncodeError, MalformedPayload
from calculator_rpc.common.messages import (
    BinaryOperationReply,
    BinaryOperationReplyProto,
    BinaryOperationRequest,
    BinaryOperationRequestProto,
)


class MessageCodec(BaseModel):
    """
    Codec for one message kind.

    Serialisation is not canonical: ``encode(decode(data))`` may differ from
    ``data``, but ``decode(encode(message))`` always reproduces ``message``.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    model: Type[BaseModel] = Field(..., description="Typed message class handed to handlers")
    wire: Type[Message] = Field(..., description="Protobuf class used on the wire")

    def decode(self, data: bytes) -> BaseModel:
        """
        Decode wire bytes into a typed message.

        :param bytes data: Raw protobuf payload

        :return: Validated message instance
        :rtype: BaseModel
        :raises MalformedPayload: If the bytes are not a valid message or carry unknown fields
        """
        wire_message = self.wire()
        try:
            wire_message.ParseFromString(data)
        except ProtobufDecodeError as exc:
            raise MalformedPayload(f"Cannot decode {self.model.__name__}: {exc}") from exc

        # Unknown fields include known field numbers sent with the wrong wire type
        unknown_fields = UnknownFieldSet(wire_message)
        if len(unknown_fields):
            numbers = sorted({field.field_number for field in unknown_fields})
            raise MalformedPayload(f"Unexpected fields in {self.model.__name__}: {numbers}")

        fields: Dict[str, Any] = {
            descriptor.name: getattr(wire_message, descriptor.name)
            for descriptor in wire_message.DESCRIPTOR.fields
        }
        try:
            return self.model.model_validate(fields)
        except ValidationError as exc:
            raise MalformedPayload(f"Invalid {self.model.__name__}: {exc}") from exc

    def encode(self, message: BaseModel) -> bytes:
        """
        Encode a typed message into wire bytes.

        :param BaseModel message: Instance of the codec's model

        :return: Protobuf payload
        :rtype: bytes
        :raises EncodeError: If the message has the wrong type or does not fit the wire format
        """
        if not isinstance(message, self.model):
            raise EncodeError(
                f"Expected {self.model.__name__}, got {type(message).__name__}"
            )
        try:
            return self.wire(**message.model_dump()).SerializeToString()
        except (TypeError, ValueError) as exc:
            raise EncodeError(f"Cannot encode {self.model.__name__}: {exc}") from exc


REQUEST_CODEC = MessageCodec(model=BinaryOperationRequest, wire=BinaryOperationRequestProto)
REPLY_CODEC = MessageCodec(model=BinaryOperationReply, wire=BinaryOperationReplyProto)
