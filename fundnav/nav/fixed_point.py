"""Checked integer arithmetic for fixed-point USD amounts and basis points.

Amounts are unsigned integers bounded to 256 bits. Any operation that would
leave that range, or divide by zero, raises ArithmeticFault instead of
wrapping or truncating to a default.
"""
from __future__ import annotations

from dataclasses import dataclass

from fundnav.nav.errors import ArithmeticFault

UINT_MAX = 2**256 - 1
INT_MAX = 2**255 - 1
INT_MIN = -(2**255)


def _check_uint(x: int, op: str) -> int:
    if x < 0:
        raise ArithmeticFault(f"{op}: underflow ({x})")
    if x > UINT_MAX:
        raise ArithmeticFault(f"{op}: overflow")
    return x


def to_uint(x: int) -> int:
    """Validate an incoming value as an unsigned amount."""
    if isinstance(x, bool) or not isinstance(x, int):
        raise ArithmeticFault(f"expected an integer amount, got {type(x).__name__}")
    return _check_uint(x, "to_uint")


def add(a: int, b: int) -> int:
    return _check_uint(a + b, "add")


def sub(a: int, b: int) -> int:
    return _check_uint(a - b, "sub")


def mul(a: int, b: int) -> int:
    return _check_uint(a * b, "mul")


def div(a: int, b: int) -> int:
    """Floor division of unsigned amounts."""
    if b == 0:
        raise ArithmeticFault("div: division by zero")
    return _check_uint(a // b, "div")


def mul_div(a: int, b: int, d: int) -> int:
    """a * b / d with the multiply performed first."""
    return div(mul(a, b), d)


@dataclass(frozen=True)
class SignedAmount:
    """Transient signed value used only for the gain/loss of a cycle."""

    value: int

    def __post_init__(self):
        if not (INT_MIN <= self.value <= INT_MAX):
            raise ArithmeticFault("signed amount out of range")

    @classmethod
    def difference(cls, a: int, b: int) -> "SignedAmount":
        return cls(to_uint(a) - to_uint(b))

    def minus(self, x: int) -> "SignedAmount":
        return SignedAmount(self.value - to_uint(x))

    @property
    def is_gain(self) -> bool:
        return self.value >= 0

    def magnitude(self) -> int:
        return _check_uint(abs(self.value), "magnitude")

    def to_unsigned(self) -> int:
        """Cast back to an unsigned amount; negative values are rejected."""
        if self.value < 0:
            raise ArithmeticFault(f"cannot cast negative amount {self.value} to unsigned")
        return _check_uint(self.value, "to_unsigned")
