"""Three ways to compute 1 + 2 + ... + n.

All three return 0 for n <= 0 and agree for every n they accept.

  sum_to_n_iterative  O(n) time, O(1) space
  sum_to_n_formula    O(1) time, O(1) space (Gauss)
  sum_to_n_recursive  O(n) time, O(n) stack; bounded by MAX_RECURSIVE_N
"""

import sys

# Half the interpreter limit leaves room for the caller's own frames.
MAX_RECURSIVE_N = sys.getrecursionlimit() // 2


def _check_int(n: int) -> None:
    if isinstance(n, bool) or not isinstance(n, int):
        raise TypeError(f"n must be an int, got {type(n).__name__}")


def sum_to_n_iterative(n: int) -> int:
    """Accumulate 1..n in a loop."""
    _check_int(n)
    total = 0
    for i in range(1, n + 1):
        total += i
    return total


def sum_to_n_formula(n: int) -> int:
    """Closed form n(n+1)/2, integer division keeps the result exact."""
    _check_int(n)
    if n <= 0:
        return 0
    return n * (n + 1) // 2


def sum_to_n_recursive(n: int) -> int:
    """n + sum(n - 1). Raises ValueError above MAX_RECURSIVE_N."""
    _check_int(n)
    if n > MAX_RECURSIVE_N:
        raise ValueError(
            f"n={n} exceeds recursion bound {MAX_RECURSIVE_N}; use sum_to_n_formula"
        )
    return _recurse(n)


def _recurse(n: int) -> int:
    if n <= 0:
        return 0
    return n + _recurse(n - 1)


if __name__ == "__main__":
    for value in (5, 10):
        print(f"n = {value}")
        print("  iterative:", sum_to_n_iterative(value))
        print("  formula:  ", sum_to_n_formula(value))
        print("  recursive:", sum_to_n_recursive(value))
