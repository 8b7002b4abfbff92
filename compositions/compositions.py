# -*- coding: utf-8 -*-

# Built-ins
import warnings

# External
import numpy as np
import pandas as pd

# Compositions
from .exceptions import DimensionMismatchError, NumericDegeneracyError
from .matrix import Matrix64
from .utils import check_compositional, get_option

__all__ = [
    "clo", "clr", "alr", "cpt", "apt",
    "transform_closure", "transform_clr", "transform_alr", "transform_cpt", "transform_apt",
]

# =========
# Utilities
# =========
def _check_output(operation, out, expected):
    expected = tuple(expected)
    if tuple(out.dims()) != expected:
        raise DimensionMismatchError(operation, expected=expected, received=out.dims())

def _apply_numeric_policy(operation, result):
    """
    Apply the `numeric_degeneracy` option to a computed result before it is written
    """
    policy = get_option("numeric_degeneracy")
    if policy == "propagate":
        return result
    n_nonfinite = int(np.sum(~np.isfinite(result)))
    if n_nonfinite:
        if policy == "raise":
            raise NumericDegeneracyError(operation, n_nonfinite)
        warnings.warn("N={} non-finite values produced by `{}`.  Check for zeros, negative values, or compositions that sum to zero.".format(n_nonfinite, operation), RuntimeWarning)
    return result

def _closure(X):
    with np.errstate(divide="ignore", invalid="ignore"):
        return X/X.sum(axis=1).reshape(-1,1)

# ===========================
# Transforms
# ===========================
def clo(data:Matrix64, out:Matrix64):
    """
    # Description
    Closure: scale each composition so its parts sum to 1

        out[i,j] = data[i,j] / sum_j(data[i,j])

    # Parameters
        * data: Matrix64 of compositions (rows=compositions, columns=parts)
        * out: Matrix64 with the same shape as `data` (may be `data` itself)

    # Output
        `out`

    A composition summing to zero yields NaN/Inf (see `set_option("numeric_degeneracy", ...)`)
    """
    _check_output("clo", out, data.dims())
    X_closure = _apply_numeric_policy("clo", _closure(data.values))
    out.values[...] = X_closure
    return out

def clr(data:Matrix64, out:Matrix64):
    """
    # Description
    Centered log-ratio transform

        out[i,j] = ln(data[i,j]) - mean_j(ln(data[i,j]))

    Maps a D-part composition onto the D-dimensional clr-plane (each row sums to 0) so
    the covariance of the transformed data is always singular.  Relation between each
    part and its transformed variable is preserved.

    # Parameters
        * data: Matrix64 of compositions, not necessarily closed
        * out: Matrix64 with the same shape as `data` (may be `data` itself)

    # Output
        `out`

    Zeros give -Inf/NaN and negative parts give NaN (see `set_option("numeric_degeneracy", ...)`)

    Aitchison, J. (1986) The Statistical Analysis of Compositional Data, Monographs on Statistics and
    Applied Probability. Chapman & Hall Ltd., London (UK). 416p.
    """
    _check_output("clr", out, data.dims())
    with np.errstate(divide="ignore", invalid="ignore"):
        X_log = np.log(data.values)
        X_clr = X_log - X_log.sum(axis=1).reshape(-1,1)/data.cols()
    X_clr = _apply_numeric_policy("clr", X_clr)
    out.values[...] = X_clr
    return out

def alr(data:Matrix64, out:Matrix64):
    """
    # Description
    Additive log-ratio transform using the last part as the reference

        out[i,j] = ln(data[i,j] / data[i,D-1])  for j in [0, D-1)

    # Parameters
        * data: Matrix64 of compositions (n x D)
        * out: Matrix64 of shape (n x D-1)

    # Output
        `out`
    """
    n, m = data.dims()
    expected = (n, m - 1) if n else (0, 0)
    _check_output("alr", out, expected)
    X = data.values
    with np.errstate(divide="ignore", invalid="ignore"):
        X_alr = np.log(X[:,:-1]/X[:,-1:])
    X_alr = _apply_numeric_policy("alr", X_alr)
    out.values[...] = X_alr
    return out

def cpt(data:Matrix64, out:Matrix64):
    """
    # Description
    Centered planar transform: the closed composition minus the barycenter of the simplex

        out[i,j] = clo(data)[i,j] - 1/D

    Each row sums to 0.

    # Parameters
        * data: Matrix64 of compositions (n x D)
        * out: Matrix64 with the same shape as `data` (may be `data` itself)

    # Output
        `out`
    """
    _check_output("cpt", out, data.dims())
    n, m = data.dims()
    X_cpt = _closure(data.values)
    if m:
        X_cpt -= 1.0/m
    X_cpt = _apply_numeric_policy("cpt", X_cpt)
    out.values[...] = X_cpt
    return out

def apt(data:Matrix64, out:Matrix64):
    """
    # Description
    Additive planar transform: every part divided by the sum of the first D-1 parts

        out[i,j] = data[i,j] / sum_{j<D-1}(data[i,j])  for j in [0, D)

    The output keeps all D columns (including the reference part).

    # Parameters
        * data: Matrix64 of compositions (n x D)
        * out: Matrix64 with the same shape as `data` (may be `data` itself)

    # Output
        `out`
    """
    _check_output("apt", out, data.dims())
    X = data.values
    with np.errstate(divide="ignore", invalid="ignore"):
        X_apt = X/X[:,:-1].sum(axis=1).reshape(-1,1)
    X_apt = _apply_numeric_policy("apt", X_apt)
    out.values[...] = X_apt
    return out

# =====================
# Array/Pandas wrappers
# =====================
def _transform(func, X, n_components_dropped=0, checks=True):
    n_dimensions = len(X.shape)
    if checks:
        check_compositional(X, n_dimensions)

    # 1-Dimensional
    if n_dimensions == 1:
        components = None
        if isinstance(X, pd.Series):
            components = X.index
            X = X.values
        X_transformed = _transform(func, np.asarray(X).reshape(1,-1), n_components_dropped=n_components_dropped, checks=False)[0]
        if components is not None:
            X_transformed = pd.Series(X_transformed, index=components[:len(components) - n_components_dropped])
        return X_transformed

    # 2-Dimensional
    index = None
    components = None
    if isinstance(X, pd.DataFrame):
        index = X.index
        components = X.columns
        X = X.values

    data = Matrix64.from_array(X, copy=True)
    n, m = data.dims()
    assert n == 0 or m > n_components_dropped, "`X` must have more than {} component(s) for `{}`".format(n_components_dropped, func.__name__)
    out = func(data, Matrix64(n, max(m - n_components_dropped, 0)))
    X_transformed = out.values
    if X_transformed.shape[0] == 0:
        X_transformed = X_transformed.reshape(0, max(np.asarray(X).shape[1] - n_components_dropped, 0))

    if index is not None:
        X_transformed = pd.DataFrame(X_transformed, index=index, columns=components[:len(components) - n_components_dropped])
    return X_transformed

def transform_closure(X, checks=True):
    """
    # Description
    Closure (e.g., total sum scaling, relative abundance) that can handle 1D and 2D NumPy and Pandas objects

    # Parameters
        * X:
            - Compositional data
            (1D): pd.Series or 1D np.array
            (2D): pd.DataFrame or 2D np.array
        * checks:
            Check whether or not dimensions are correct
    * Output
        Closure transformed matching input object class
    """
    return _transform(clo, X, checks=checks)

def transform_clr(X, checks=True):
    """
    Wrapper around `clr` for 1D and 2D NumPy and Pandas objects (output matches input object class)
    """
    return _transform(clr, X, checks=checks)

def transform_alr(X, checks=True):
    """
    # Description
    Wrapper around `alr` for 1D and 2D NumPy and Pandas objects.  The last component is
    the reference and is dropped from the output (and its labels).

    # Parameters
        * X:
            - Compositional data
            (1D): pd.Series or 1D np.array
            (2D): pd.DataFrame or 2D np.array
        * checks:
            Check whether or not dimensions are correct
    """
    return _transform(alr, X, n_components_dropped=1, checks=checks)

def transform_cpt(X, checks=True):
    """
    Wrapper around `cpt` for 1D and 2D NumPy and Pandas objects (output matches input object class)
    """
    return _transform(cpt, X, checks=checks)

def transform_apt(X, checks=True):
    """
    Wrapper around `apt` for 1D and 2D NumPy and Pandas objects (output matches input object class)
    """
    return _transform(apt, X, checks=checks)
