# -*- coding: utf-8 -*-

__version__= "2026.10.18"
__author__ = "Josh L. Espinoza"
__email__ = "jespinoz@jcvi.org, jol.espinoz@gmail.com"
__url__ = "https://github.com/jolespin/compositions"
__license__ = "BSD-3"
__developmental__ = True

# ==============
# Direct Exports
# ==============
__functions__ = [
    # Transforms (Matrix64)
    "clo", "clr", "alr", "cpt", "apt",
    # Transforms (NumPy/Pandas)
    "transform_closure", "transform_clr", "transform_alr", "transform_cpt", "transform_apt",
    # Options
    "get_option", "set_option", "reset_option", "option_context", "describe_options",
    # Utilities
    "assert_acceptable_arguments", "check_compositional",
    # Numeric
    "sign", "round_half_up", "cube", "ln", "uniform_int", "factorial",
]
__classes__ = [
    "Matrix64",
    # Exceptions
    "CompositionsError", "DimensionMismatchError", "MalformedInputError", "NumericDegeneracyError",
]

__all__ = sorted(__functions__ + __classes__)

from .exceptions import *
from .utils import *
from .numeric import *
from .matrix import *
from .compositions import *
