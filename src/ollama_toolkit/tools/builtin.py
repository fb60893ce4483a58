"""Ready-made tools that need no network access."""

import ast
import operator
from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from pydantic import BaseModel, Field

from ollama_toolkit.tools.base import Tool

_BINARY_OPERATORS = {
    ast.Add: operator.add,
    ast.Sub: operator.sub,
    ast.Mult: operator.mul,
    ast.Div: operator.truediv,
    ast.FloorDiv: operator.floordiv,
    ast.Mod: operator.mod,
    ast.Pow: operator.pow,
}

_UNARY_OPERATORS = {
    ast.UAdd: operator.pos,
    ast.USub: operator.neg,
}

# Largest integer result, in bits, the calculator will compute
MAX_RESULT_BITS = 10_000


class CalculatorParams(BaseModel):
    expression: str = Field(
        ...,
        description="Arithmetic expression to evaluate, e.g. '(2 + 3) * 4 / 5'",
    )


class Calculator(Tool):
    """Evaluates arithmetic expressions without calling ``eval``."""

    name = "calculator"
    description = (
        "Evaluate an arithmetic expression. Supports + - * / // % ** "
        "and parentheses."
    )
    Params = CalculatorParams

    async def call(self, params: CalculatorParams) -> int | float:
        tree = ast.parse(params.expression.strip(), mode="eval")
        return self._evaluate(tree.body)

    def _evaluate(self, node: ast.AST) -> int | float:
        if isinstance(node, ast.Constant) and type(node.value) in (int, float):
            return node.value
        if isinstance(node, ast.UnaryOp) and type(node.op) in _UNARY_OPERATORS:
            return _UNARY_OPERATORS[type(node.op)](self._evaluate(node.operand))
        if isinstance(node, ast.BinOp) and type(node.op) in _BINARY_OPERATORS:
            left = self._evaluate(node.left)
            right = self._evaluate(node.right)
            _check_result_size(node.op, left, right)
            return _BINARY_OPERATORS[type(node.op)](left, right)
        raise ValueError(f"Unsupported expression element: {ast.dump(node)}")


def _check_result_size(
    op: ast.operator, left: int | float, right: int | float
) -> None:
    if type(left) is not int or type(right) is not int:
        return
    if isinstance(op, ast.Pow) and right > 0:
        bits = left.bit_length() * right
    elif isinstance(op, ast.Mult):
        bits = left.bit_length() + right.bit_length()
    else:
        return
    if bits > MAX_RESULT_BITS:
        raise ValueError(
            f"Result would need about {bits} bits, more than the {MAX_RESULT_BITS} allowed"
        )


class CurrentTimeParams(BaseModel):
    timezone: str | None = Field(
        default=None,
        description="IANA time zone name such as 'Europe/Berlin'. Defaults to UTC.",
    )


class CurrentTime(Tool):
    """Reports the current date and time."""

    name = "get_current_time"
    description = "Get the current date and time as an ISO 8601 string"
    Params = CurrentTimeParams

    async def call(self, params: CurrentTimeParams) -> str:
        tz = ZoneInfo(params.timezone) if params.timezone else timezone.utc
        return datetime.now(tz).isoformat()


def builtin_tools() -> list[Tool]:
    """Fresh instances of every built-in tool."""
    return [Calculator(), CurrentTime()]
