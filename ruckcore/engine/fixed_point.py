"""Integer primitives shared by the estimation engine; no floats anywhere."""

from __future__ import annotations

INT32_MAX = 2**31 - 1


def tdiv(a: int, b: int) -> int:
    """Integer division truncating toward zero (C semantics, unlike ``//``)."""
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b > 0) else -q


def isqrt(x: int) -> int:
    """Floor square root via the binary digit-by-digit method.

    Exact for 0 <= x < 2**62. Negative input returns 0.
    """
    if x <= 0:
        return 0
    op = x
    res = 0
    one = 1 << 62

    while one > op:
        one >>= 2
    while one != 0:
        if op >= res + one:
            op -= res + one
            res = (res >> 1) + one
        else:
            res >>= 1
        one >>= 2
    return res


def saturating_add(total: int, delta: int, cap: int = INT32_MAX) -> int:
    """Add and clamp to [0, cap] instead of wrapping."""
    return min(max(total + delta, 0), cap)
