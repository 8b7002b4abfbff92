# -*- coding: utf-8 -*-

# Built-ins
import sys, io, math
from decimal import Decimal

# External
import numpy as np
import pandas as pd

# Compositions
from .exceptions import DimensionMismatchError, MalformedInputError
from .utils import get_option

__all__ = ["Matrix64"]

# ==========
# Formatting
# ==========
def _shortest_string(value):
    """
    Shortest round-trip representation of a float with integral values printed without
    a decimal point and scientific notation for decimal exponents < -4 or >= 6
    (e.g., 1 -> '1', 0.25 -> '0.25', 1e6 -> '1e+06', 1.5e-05 -> '1.5e-05')
    """
    value = float(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    if value == 0:
        return "-0" if math.copysign(1.0, value) < 0 else "0"

    is_negative, digits, exponent = Decimal(repr(value)).as_tuple()
    digits = "".join(map(str, digits))
    decimal_point = len(digits) + exponent
    digits = digits.rstrip("0")
    n_digits = len(digits)
    prefix = "-" if is_negative else ""

    # Scientific
    exponent_10 = decimal_point - 1
    if exponent_10 < -4 or exponent_10 >= 6:
        mantissa = digits[0]
        if n_digits > 1:
            mantissa += "." + digits[1:]
        return "{}{}e{}{:02d}".format(prefix, mantissa, "+" if exponent_10 >= 0 else "-", abs(exponent_10))

    # Fixed
    if decimal_point <= 0:
        return "{}0.{}{}".format(prefix, "0"*(-decimal_point), digits)
    if decimal_point >= n_digits:
        return "{}{}{}".format(prefix, digits, "0"*(decimal_point - n_digits))
    return "{}{}.{}".format(prefix, digits[:decimal_point], digits[decimal_point:])

def _fixed_string(value, precision=None, width=6):
    if not math.isfinite(value):
        return _shortest_string(value).rjust(width)
    if precision is None:
        precision = get_option("display.precision")
    return "{:{}.{}f}".format(float(value), width, precision)

def _literal_string(value):
    # Source text that evaluates back to `value`
    value = float(value)
    if math.isnan(value):
        return "float('nan')"
    if math.isinf(value):
        return "float('inf')" if value > 0 else "float('-inf')"
    return repr(value)

# ======
# Matrix
# ======
class Matrix64(object):
    """
    # Description
    Dense 2D matrix of float64 values (rows=compositions, columns=components/parts).

    Elements are stored in a single contiguous buffer and every row is a view of
    that buffer, so mutating a row (e.g., `matrix[0][1] = 2.0`) is visible through
    the whole matrix.  A matrix with 0 rows has 0 columns and a matrix with
    rows has at least 1 column.

    # Parameters
        * n_rows: Number of rows (>= 0)
        * n_cols: Number of columns (>= 1 if `n_rows` > 0)

    # Usage
        matrix = Matrix64(2, 3)             # zero-initialized (2x3)
        matrix = Matrix64.from_rows([[1, 2, 4], [3, 3, 3]])
        matrix = Matrix64.read_csv("compositions.csv")
    """
    __hash__ = None

    def __init__(self, n_rows:int=0, n_cols:int=0):
        assert n_rows >= 0, "`n_rows` must be >= 0"
        assert n_cols >= 0, "`n_cols` must be >= 0"
        if n_rows == 0:
            n_cols = 0
        assert n_rows == 0 or n_cols >= 1, "A matrix with rows must have at least one column"
        self._data = np.zeros((n_rows, n_cols), dtype=np.float64)

    # ============
    # Constructors
    # ============
    @classmethod
    def from_array(cls, a, copy=True):
        """
        Build a matrix from a 2D array-like.  If `copy=False` and `a` is already a
        C-contiguous float64 np.array then the matrix shares its buffer.
        """
        a = np.asarray(a, dtype=np.float64)
        assert a.ndim == 2, "`a` must be 2D"
        assert a.shape[0] == 0 or a.shape[1] >= 1, "A matrix with rows must have at least one column"
        if copy or not a.flags.c_contiguous:
            a = np.array(a, dtype=np.float64, order="C")
        if a.shape[0] == 0:
            a = np.zeros((0, 0), dtype=np.float64)
        matrix = cls.__new__(cls)
        matrix._data = a
        return matrix

    @classmethod
    def from_rows(cls, rows):
        """
        Build a matrix from a sequence of equal-length rows
        """
        rows = [list(row) for row in rows]
        if not rows:
            return cls(0, 0)
        n_cols = len(rows[0])
        for i, row in enumerate(rows):
            if len(row) != n_cols:
                raise DimensionMismatchError(
                    "from_rows",
                    expected=(len(rows), n_cols),
                    received=(len(rows), len(row)),
                    message="Rows must have equal lengths: row 0 has {} values but row {} has {}".format(n_cols, i, len(row)),
                )
        matrix = cls(len(rows), n_cols)
        matrix._data[:] = rows
        return matrix

    @classmethod
    def from_frame(cls, df:pd.DataFrame):
        """
        Build a matrix from the values of a pd.DataFrame (labels are dropped)
        """
        return cls.from_array(df.values, copy=True)

    def to_frame(self, index=None, columns=None):
        return pd.DataFrame(self._data.copy(), index=index, columns=columns)

    # ==========
    # Dimensions
    # ==========
    def dims(self):
        """
        (n_rows, n_cols)
        """
        return self._data.shape

    def rows(self):
        return self._data.shape[0]

    def cols(self):
        if self._data.shape[0] == 0:
            return 0
        return self._data.shape[1]

    @property
    def shape(self):
        return self.dims()

    @property
    def values(self):
        """
        The backing np.array (not a copy)
        """
        return self._data

    def __len__(self):
        return self.rows()

    # ======
    # Access
    # ======
    def __getitem__(self, key):
        return self._data[key]

    def __setitem__(self, key, value):
        self._data[key] = value

    def __iter__(self):
        return iter(self._data)

    def tolist(self):
        return self._data.tolist()

    # =======
    # Copying
    # =======
    def copy_to(self, target):
        """
        Copy values into an existing matrix of the same shape
        """
        if target.dims() != self.dims():
            raise DimensionMismatchError("copy_to", expected=self.dims(), received=target.dims())
        target._data[...] = self._data

    def copy_from(self, source):
        """
        Copy values from an existing matrix of the same shape
        """
        if source.dims() != self.dims():
            raise DimensionMismatchError("copy_from", expected=self.dims(), received=source.dims())
        self._data[...] = source._data

    def clone(self):
        """
        New matrix with the same shape and values that shares no memory with this one
        """
        return Matrix64.from_array(self._data, copy=True)

    # ==========
    # Operations
    # ==========
    def swap_rows(self, i:int, j:int):
        """
        Swap rows `i` and `j` in place.  Indices must be valid rows.
        """
        self._data[[i, j], :] = self._data[[j, i], :]

    def swap_cols(self, i:int, j:int):
        """
        Swap columns `i` and `j` in place.  Indices must be valid columns.
        """
        self._data[:, [i, j]] = self._data[:, [j, i]]

    def transpose(self):
        return Matrix64.from_array(self._data.T, copy=True)

    @property
    def T(self):
        return self.transpose()

    def equals(self, other):
        """
        True if `other` has the same dimensions and every element is exactly equal (no tolerance)
        """
        if not isinstance(other, Matrix64):
            return False
        if self.dims() != other.dims():
            return False
        return bool(np.array_equal(self._data, other._data))

    def __eq__(self, other):
        return self.equals(other)

    def __ne__(self, other):
        return not self.equals(other)

    # ===
    # I/O
    # ===
    @classmethod
    def read_csv(cls, filepath_or_buffer, verbose=False):
        """
        # Description
        Read a matrix from comma-separated values.  Parsing is strict: there is no
        header, no whitespace around values, every record has the same number of
        fields, and every field is a floating point literal.

        # Parameters
            * filepath_or_buffer: Path or file-like object (anything `pd.read_csv` accepts)
            * verbose: Report the shape that was read to stderr

        # Output
            Matrix64

        # Raises
            MalformedInputError if the source is empty, does not comply with RFC 4180, or
            contains a value that cannot be converted to float
        """
        text = _read_text(filepath_or_buffer)
        if text.startswith("\ufeff"):
            raise MalformedInputError("Byte order mark found at the start of the CSV source", line=1)
        for i, line in enumerate(text.splitlines(), start=1):
            if line and not line.strip():
                raise MalformedInputError("Line contains only whitespace", line=i)

        try:
            df = pd.read_csv(
                io.StringIO(text),
                header=None,
                dtype=str,
                na_filter=False,
                skip_blank_lines=True,
                engine="c",
            )
        except pd.errors.EmptyDataError as e:
            raise MalformedInputError("No data found in CSV source") from e
        except pd.errors.ParserError as e:
            raise MalformedInputError("Failed to read the CSV source (it may not comply with RFC 4180): {}".format(e)) from e

        n_rows, n_cols = df.shape
        matrix = cls(n_rows, n_cols)
        for i, record in enumerate(df.itertuples(index=False, name=None)):
            for j, field in enumerate(record):
                matrix._data[i, j] = _parse_float(field, line=i + 1, column=j)

        if verbose:
            print("Read matrix ({}x{}) from {}".format(n_rows, n_cols, getattr(filepath_or_buffer, "name", filepath_or_buffer)), file=sys.stderr)
        return matrix

    def to_csv(self, path_or_buf=None):
        """
        Write comma-separated values (no header, no index) using the shortest representation
        that reads back to the same float64.  Returns the text if `path_or_buf` is None.
        """
        return self.to_frame().to_csv(path_or_buf, header=False, index=False, na_rep="NaN", lineterminator="\n")

    # ============
    # Presentation
    # ============
    def print(self, file=None):
        """
        Each value followed by a space, one row per line, and a trailing blank line
        """
        if file is None:
            file = sys.stdout
        for row in self._data:
            file.write("".join(_shortest_string(value) + " " for value in row) + "\n")
        file.write("\n")

    def write_csv(self, file=None):
        if file is None:
            file = sys.stdout
        for row in self._data:
            file.write(",".join(map(_shortest_string, row)) + "\n")

    def write_csv3(self, file=None):
        """
        Comma-separated values formatted with width 6 and `display.precision` decimals (default: 3)
        """
        if file is None:
            file = sys.stdout
        for row in self._data:
            file.write(",".join(map(_fixed_string, row)) + "\n")

    def pretty_string(self):
        """
        # Description
        Bracketed table with right-aligned columns and the shape appended to the last row.

        # Output
            [[1 0.25]
             [3   10]](2x2)
        """
        n_rows, n_cols = self.dims()
        cells = [list(map(_shortest_string, row)) for row in self._data]
        widths = [max(len(row[j]) for row in cells) for j in range(n_cols)] if cells else []

        lines = []
        for i, row in enumerate(cells):
            line = "[" if i == 0 else " "
            line += "[" + " ".join(cell.rjust(widths[j]) for j, cell in enumerate(row)) + "]"
            if i == n_rows - 1:
                line += "]({}x{})".format(n_rows, n_cols)
            lines.append(line + "\n")
        return "".join(lines)

    def to_code(self, name="matrix", fixed=False):
        """
        Python source that rebuilds this matrix, e.g. to embed a fixture in a test:

            matrix = Matrix64.from_rows([
                [1.0, 2.0],
            ])

        If `fixed=True` values are written with width 6 and `display.precision` decimals
        """
        def _format(value):
            if fixed and math.isfinite(value):
                return _fixed_string(value)
            return _literal_string(value)

        lines = ["{} = Matrix64.from_rows([".format(name)]
        for row in self._data:
            lines.append("    [{}],".format(", ".join(map(_format, row))))
        lines.append("])")
        return "\n".join(lines) + "\n"

    def write_code(self, file=None, name="matrix", fixed=False):
        if file is None:
            file = sys.stdout
        file.write(self.to_code(name=name, fixed=fixed))

    def __str__(self):
        return self.pretty_string()

    def __repr__(self):
        return "Matrix64({}x{})".format(*self.dims())

def _parse_float(field, line, column):
    if not isinstance(field, str) or not field or any(character.isspace() or character == "_" for character in field):
        raise MalformedInputError("Could not convert {!r} to float".format(field), line=line, column=column)
    try:
        return float(field)
    except ValueError as e:
        raise MalformedInputError("Could not convert {!r} to float".format(field), line=line, column=column) from e

def _read_text(filepath_or_buffer):
    if hasattr(filepath_or_buffer, "read"):
        text = filepath_or_buffer.read()
    else:
        with open(filepath_or_buffer, "r", encoding="utf-8", newline="") as f:
            text = f.read()
    if isinstance(text, bytes):
        text = text.decode("utf-8")
    return text
