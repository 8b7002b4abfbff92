# -*- coding: utf-8 -*-

# Built-ins
import operator
from contextlib import contextmanager

# External
import numpy as np

__all__ = [
    "assert_acceptable_arguments", "check_compositional",
    "get_option", "set_option", "reset_option", "option_context", "describe_options",
]

# =========
# Utilities
# =========
def assert_acceptable_arguments(query, target, operation="le", message="Invalid option provided.  Please refer to the following for acceptable arguments:"):
    """
    le: operator.le(a, b) : <=
    eq: operator.eq(a, b) : ==
    ge: operator.ge(a, b) : >=
    """
    def is_nonstring_iterable(obj):
        condition_1 = hasattr(obj, "__iter__")
        condition_2 =  not type(obj) == str
        return all([condition_1,condition_2])

    # If query is not a nonstring iterable or a tuple
    if any([
            not is_nonstring_iterable(query),
            isinstance(query,tuple),
            ]):
        query = [query]
    query = set(query)
    target = set(target)
    func_operation = getattr(operator, operation)
    assert func_operation(query,target), "{}\n{}".format(message, target)

def check_compositional(X, n_dimensions:int=None, acceptable_dimensions:set={1,2}, is_positive=False):
    """
    # Description
    Check that 1D and 2D NumPy/Pandas objects are the correct shape (and > 0 if requested)

    # Parameters
        * X:
            - Compositional data
            (1D): pd.Series or 1D np.array
            (2D): pd.DataFrame or 2D np.array
        * n_dimensions: int
        * is_positive:
            Assert every part is strictly positive.  Off by default so that degenerate
            compositions are handled by the `numeric_degeneracy` option instead.
    """
    if n_dimensions is None:
        n_dimensions = len(X.shape)
    if not hasattr(acceptable_dimensions, "__iter__"):
        acceptable_dimensions = {acceptable_dimensions}
    assert n_dimensions in acceptable_dimensions, "`X` must be {}".format(" or ".join(map(lambda d: f"{d}D", sorted(acceptable_dimensions))))
    if n_dimensions == 2:
        assert X.shape[0] == 0 or X.shape[1] > 0, "`X` must have at least one component when it has compositions"
    if is_positive:
        assert np.all(np.asarray(X) > 0), "`X` must be strictly positive"

# =======
# Options
# =======
_option_defaults = {
    "numeric_degeneracy":"propagate",
    "display.precision":3,
}
_option_validators = {
    "numeric_degeneracy": lambda value: assert_acceptable_arguments(query=[value], target={"propagate", "warn", "raise"}),
    "display.precision": lambda value: assert_acceptable_arguments(query=[isinstance(value, (int, np.integer)) and not isinstance(value, bool) and value >= 0], target={True}, message="`display.precision` must be a non-negative integer"),
}
_options = dict(_option_defaults)

def get_option(name):
    """
    Get the current value of an option (see `describe_options`)
    """
    assert_acceptable_arguments(query=[name], target=_options)
    return _options[name]

def set_option(name, value):
    """
    # Description
    Set a process-wide option

    # Parameters
        * name:
            - 'numeric_degeneracy': How transforms handle NaN/Inf produced by zero row sums or non-positive parts
                'propagate': Non-finite values are written to the output silently (default)
                'warn': As 'propagate' but issues a RuntimeWarning with the number of non-finite values
                'raise': Raise NumericDegeneracyError and leave the output untouched
            - 'display.precision': Number of decimals used by fixed-width presentation helpers (default: 3)
        * value: New value
    """
    assert_acceptable_arguments(query=[name], target=_options)
    _option_validators[name](value)
    _options[name] = value

def reset_option(name=None):
    """
    Reset an option (or all options if `name` is None) to its default
    """
    if name is None:
        _options.update(_option_defaults)
    else:
        assert_acceptable_arguments(query=[name], target=_options)
        _options[name] = _option_defaults[name]

@contextmanager
def option_context(name, value):
    """
    Temporarily set an option within a `with` block

    usage:
    with option_context("numeric_degeneracy", "raise"):
        clr(X, out)
    """
    previous = get_option(name)
    set_option(name, value)
    try:
        yield
    finally:
        _options[name] = previous

def describe_options():
    """
    Current value of every option
    """
    return dict(_options)
