# -*- coding: utf-8 -*-

__all__ = ["CompositionsError", "DimensionMismatchError", "MalformedInputError", "NumericDegeneracyError"]

# ==========
# Exceptions
# ==========
class CompositionsError(Exception):
    """
    Base class for errors raised by `compositions`
    """
    pass

class DimensionMismatchError(CompositionsError, ValueError):
    """
    # Description
    Raised when a matrix does not have the shape an operation requires (e.g., the
    output matrix of a transform).  Raised before any element is written.

    # Parameters
        * operation: Name of the operation that rejected the matrix
        * expected: (n_rows, n_cols) required
        * received: (n_rows, n_cols) provided
    """
    def __init__(self, operation, expected, received, message=None):
        self.operation = operation
        self.expected = tuple(expected)
        self.received = tuple(received)
        if message is None:
            message = "`{}` requires a matrix of shape ({}x{}) but received ({}x{})".format(operation, *self.expected, *self.received)
        super().__init__(message)

class MalformedInputError(CompositionsError, ValueError):
    """
    # Description
    Raised when tabular input cannot be parsed into a rectangular numeric matrix.
    No partial matrix is ever returned.

    # Parameters
        * line: 1-based line (record) number of the offending cell, if known
        * column: 0-based field number of the offending cell, if known
    """
    def __init__(self, message, line=None, column=None):
        self.line = line
        self.column = column
        if line is not None:
            if column is not None:
                message = "{} (line {}, field {})".format(message, line, column)
            else:
                message = "{} (line {})".format(message, line)
        super().__init__(message)

class NumericDegeneracyError(CompositionsError, FloatingPointError):
    """
    Raised when a transform produces non-finite values (zero row sums, non-positive parts)
    and the `numeric_degeneracy` option is set to 'raise'
    """
    def __init__(self, operation, n_nonfinite):
        self.operation = operation
        self.n_nonfinite = n_nonfinite
        super().__init__("N={} non-finite values produced by `{}`.  Check for zeros, negative values, or compositions that sum to zero.".format(n_nonfinite, operation))
