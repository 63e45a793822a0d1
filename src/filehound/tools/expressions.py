"""
Comparison expressions for size and date filters.

Parses human-readable expressions such as "<10kb", ">= 1.5 mb", "< 2 days"
or "> 2024-01-01" into comparisons that can be evaluated against a byte
count or a timestamp.
"""

import operator
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional, Union


class ExpressionError(ValueError):
    """Raised when a size or date expression cannot be parsed."""
    pass


_OPERATORS = {
    '<': operator.lt,
    '<=': operator.le,
    '>': operator.gt,
    '>=': operator.ge,
    '=': operator.eq,
    '==': operator.eq,
    '!=': operator.ne,
}

SIZE_UNITS = {
    '': 1,
    'b': 1,
    'byte': 1,
    'bytes': 1,
    'k': 1024,
    'kb': 1024,
    'm': 1024 ** 2,
    'mb': 1024 ** 2,
    'g': 1024 ** 3,
    'gb': 1024 ** 3,
    't': 1024 ** 4,
    'tb': 1024 ** 4,
}

# Seconds per unit; months and years are approximated as 30 and 365 days
AGE_UNITS = {
    's': 1, 'sec': 1, 'secs': 1, 'second': 1, 'seconds': 1,
    'm': 60, 'min': 60, 'mins': 60, 'minute': 60, 'minutes': 60,
    'h': 3600, 'hr': 3600, 'hrs': 3600, 'hour': 3600, 'hours': 3600,
    'd': 86400, 'day': 86400, 'days': 86400,
    'w': 604800, 'week': 604800, 'weeks': 604800,
    'month': 2592000, 'months': 2592000,
    'y': 31536000, 'year': 31536000, 'years': 31536000,
}

DATE_FORMATS = [
    '%Y-%m-%d',
    '%Y-%m-%d %H:%M:%S',
    '%Y-%m-%dT%H:%M:%S',
    '%Y/%m/%d',
]

_OPERATOR_RE = re.compile(r'^\s*(<=|>=|==|!=|<|>|=)?\s*(.*?)\s*$')
_QUANTITY_RE = re.compile(r'^(\d+(?:\.\d+)?)\s*([a-zA-Z]*)$')


@dataclass(frozen=True)
class Comparison:
    """
    A parsed comparison: operator plus threshold.

    Attributes:
        operator: One of <, <=, >, >=, =, ==, !=
        threshold: Value on the right-hand side (bytes, seconds of age,
            or a datetime for absolute date expressions)
        expression: The original expression text
    """
    operator: str
    threshold: Union[float, datetime]
    expression: str

    def evaluate(self, value) -> bool:
        return _OPERATORS[self.operator](value, self.threshold)


def _split_operator(expression: str) -> tuple[str, str]:
    match = _OPERATOR_RE.match(expression)
    op, operand = match.group(1) or '=', match.group(2)
    if not operand:
        raise ExpressionError(f"Missing value in expression: '{expression}'")
    return op, operand


def parse_size_expression(expression: Union[str, int]) -> Comparison:
    """
    Parse a size expression into a comparison over a byte count.

    Args:
        expression: Expression such as "<10kb" or ">= 2 MB"; a bare integer
            means "exactly this many bytes"

    Returns:
        Comparison with the threshold expressed in bytes

    Raises:
        ExpressionError: If the expression is malformed or uses an unknown unit
    """
    if isinstance(expression, bool):
        raise ExpressionError(f"Invalid size expression: {expression!r}")
    if isinstance(expression, (int, float)):
        if expression < 0:
            raise ExpressionError(f"Size cannot be negative: {expression}")
        return Comparison('=', float(expression), str(expression))
    if not isinstance(expression, str):
        raise ExpressionError(f"Invalid size expression: {expression!r}")

    op, operand = _split_operator(expression)
    match = _QUANTITY_RE.match(operand)
    if not match:
        raise ExpressionError(f"Invalid size expression: '{expression}'")

    amount, unit = match.groups()
    multiplier = SIZE_UNITS.get(unit.lower())
    if multiplier is None:
        raise ExpressionError(f"Unknown size unit '{unit}' in expression: '{expression}'")

    return Comparison(op, float(amount) * multiplier, expression)


def _parse_absolute_date(value: str) -> Optional[datetime]:
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue
    return None


def parse_date_expression(expression: str) -> Comparison:
    """
    Parse a date expression.

    Relative expressions ("< 2 days") compare the age of a timestamp, so
    "< 2 days" holds for anything newer than two days. Absolute expressions
    ("< 2024-01-01") compare the timestamp itself.

    Raises:
        ExpressionError: If the expression is malformed
    """
    if not isinstance(expression, str):
        raise ExpressionError(f"Invalid date expression: {expression!r}")

    op, operand = _split_operator(expression)

    absolute = _parse_absolute_date(operand)
    if absolute is not None:
        return Comparison(op, absolute, expression)

    match = _QUANTITY_RE.match(operand)
    if not match or not match.group(2):
        raise ExpressionError(f"Invalid date expression: '{expression}'")

    amount, unit = match.groups()
    seconds = AGE_UNITS.get(unit.lower())
    if seconds is None:
        raise ExpressionError(f"Unknown time unit '{unit}' in expression: '{expression}'")

    return Comparison(op, float(amount) * seconds, expression)


def size_matcher(expression: Union[str, int]) -> Callable[[int], bool]:
    """Compile a size expression into a predicate over byte counts."""
    comparison = parse_size_expression(expression)
    return comparison.evaluate


def date_matcher(expression: str, now: Optional[Callable[[], datetime]] = None) -> Callable[[datetime], bool]:
    """
    Compile a date expression into a predicate over timestamps.

    Args:
        expression: Relative or absolute date expression
        now: Clock used to compute ages (defaults to datetime.now)
    """
    comparison = parse_date_expression(expression)
    clock = now or datetime.now

    if isinstance(comparison.threshold, datetime):
        return comparison.evaluate

    def matches(timestamp: datetime) -> bool:
        age = (clock() - timestamp).total_seconds()
        return comparison.evaluate(age)

    return matches
