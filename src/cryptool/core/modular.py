from __future__ import annotations

from typing import Tuple


def gcd(x: int, n: int) -> int:
    x, n = abs(x), abs(n)
    while n:
        x, n = n, x % n
    return x


def mod(x: int, n: int) -> int:
    """Mathematical modulo: result is in [0, n) even for negative x."""
    return x % abs(n)


def egcd(a: int, b: int) -> Tuple[int, int, int]:
    if a == 0:
        return (b, 0, 1)
    g, y, x = egcd(b % a, a)
    return (g, x - (b // a) * y, y)


def inverse_mod(x: int, n: int) -> int:
    """Multiplicative inverse of x mod n, or 0 when gcd(x, n) != 1."""
    x = mod(x, n)
    g, v, _ = egcd(x, n)
    if g != 1:
        return 0
    return mod(v, n)


def units(n: int) -> list[int]:
    """All a in [0, n) with gcd(a, n) == 1, ascending."""
    return [a for a in range(n) if gcd(a, n) == 1]
