# Versor: Universal Geometric Algebra Neural Network (C) 2026 Eunkyum Kim
# Licensed under the Apache License, Version 2.0 | "Unbending" Paradigm

"""Blade bitmask utilities.

A blade is an int whose set bits name the participating basis vectors,
written in ascending index order. ``e_i`` sits at bit ``i``; a basis vector
moved past another one flips the sign once.
"""

from typing import List


def grade(blade: int) -> int:
    """Number of basis vectors in the blade (popcount)."""
    return bin(blade).count('1')


def bits(blade: int) -> List[int]:
    """Ascending basis indices set in *blade*."""
    out = []
    i = 0
    while blade:
        if blade & 1:
            out.append(i)
        blade >>= 1
        i += 1
    return out


def right_shifts(bit: int, blade: int) -> int:
    """Count set bits of *blade* strictly above basis index *bit*.

    These are the factors ``e_bit`` has to pass to reach the right end of
    the blade.
    """
    return grade(blade >> (bit + 1))


def left_shifts(bit: int, blade: int) -> int:
    """Count set bits of *blade* strictly below basis index *bit*.

    These are the factors ``e_bit`` has to pass to reach the left end of
    the blade.
    """
    return grade(blade & ((1 << bit) - 1))


def reorder_sign(lhs: int, rhs: int) -> int:
    """Sign of rewriting ``e_lhs e_rhs`` (disjoint blades) in canonical order.

    Every factor of *rhs* moves left past the factors of *lhs* with a
    higher index.
    """
    swaps = 0
    for j in bits(rhs):
        swaps += right_shifts(j, lhs)
    return -1 if swaps & 1 else 1


def reverse_sign(blade: int) -> int:
    """Reversion sign ``(-1)^(k(k-1)/2)`` with ``k = grade(blade)``."""
    k = grade(blade)
    return -1 if (k * (k - 1) // 2) & 1 else 1
