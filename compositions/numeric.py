# -*- coding: utf-8 -*-

# Built-ins
import math

# External
import numpy as np
from scipy.special import factorial as _factorial

__all__ = ["INT_INF", "FLOAT_INF", "sign", "round_half_up", "cube", "ln", "uniform_int", "factorial"]

INT_INF = 2**31 - 1
FLOAT_INF = float(np.finfo(np.float64).max)

# ===============
# Numeric helpers
# ===============
def sign(x):
    """
    -1, 0, or 1 depending on the sign of `x` (int or float)
    """
    if x == 0:
        return 0
    if x < 0:
        return -1
    return 1

def round_half_up(x):
    """
    Round to the nearest integer with halves rounded towards +infinity (e.g., 2.5 -> 3, -2.5 -> -2)
    """
    return int(math.floor(x + 0.5))

def cube(x):
    return x * x * x

def ln(x):
    """
    Natural logarithm that accepts scalars or arrays.  Non-positive values follow
    IEEE-754 (log(0) = -inf, log(x<0) = nan)
    """
    with np.errstate(divide="ignore", invalid="ignore"):
        return np.log(x)

def uniform_int(low:int, high:int, random_state=None):
    """
    # Description
    Uniform random integer in the closed interval [low, high]

    # Parameters
        * low, high: Inclusive bounds (low <= high)
        * random_state: None, int seed, or np.random.Generator
    """
    assert low <= high, "`low` must be <= `high`"
    rng = np.random.default_rng(random_state)
    return int(rng.integers(low, high, endpoint=True))

def factorial(n:int):
    """
    Exact factorial of a non-negative integer
    """
    if n < 0:
        raise ValueError("factorial not defined for negative numbers")
    return int(_factorial(n, exact=True))
