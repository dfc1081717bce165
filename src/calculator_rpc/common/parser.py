"""Parse operation lines for the batch client."""
from typing import Dict, List, NamedTuple

# Infix symbols and the operation each one names
INFIX_OPERATORS: Dict[str, str] = {
    "+": "add",
    "-": "subtract",
}


class ParsedOperation(NamedTuple):
    """An operation name and its two operands."""

    name: str
    operand_a: int
    operand_b: int


class OperationParser:
    """
    Parse one operation per line.

    Two forms are accepted, tokens separated by whitespace:
        - prefix: ``add 2 3``, ``subtract 10 4`` (any operation name)
        - infix: ``2 + 3``, ``10 - 4``

    Operands are integers.
    """

    @staticmethod
    def tokenize(line: str) -> List[str]:
        """
        Split a line into tokens.

        :param str line: Operation line

        :return: List of tokens
        :rtype: List[str]
        """
        return line.split()

    @staticmethod
    def _to_operand(token: str, line: str) -> int:
        try:
            return int(token)
        except ValueError:
            raise ValueError(f"Operand is not an integer: {token!r} in {line!r}") from None

    @staticmethod
    def parse(line: str) -> ParsedOperation:
        """
        Parse an operation line.

        :param str line: Operation line

        :return: Parsed operation
        :rtype: ParsedOperation
        :raises ValueError: If the line is empty or malformed
        """
        tokens: List[str] = OperationParser.tokenize(line)
        if len(tokens) != 3:
            raise ValueError(f"Expected three tokens, got {len(tokens)}: {line!r}")

        first, second, third = tokens
        if second in INFIX_OPERATORS:
            name = INFIX_OPERATORS[second]
            operand_a, operand_b = first, third
        elif first.isidentifier():
            name = first
            operand_a, operand_b = second, third
        else:
            raise ValueError(f"No operation name or infix operator in {line!r}")

        return ParsedOperation(
            name=name,
            operand_a=OperationParser._to_operand(operand_a, line),
            operand_b=OperationParser._to_operand(operand_b, line),
        )
