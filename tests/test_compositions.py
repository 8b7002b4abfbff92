import warnings

import numpy as np
import pandas as pd
import pytest

from compositions import (
    DimensionMismatchError,
    Matrix64,
    NumericDegeneracyError,
    alr,
    apt,
    clo,
    clr,
    cpt,
    option_context,
    set_option,
    transform_alr,
    transform_apt,
    transform_closure,
    transform_clr,
    transform_cpt,
)

SAME_SHAPE_TRANSFORMS = [clo, clr, cpt, apt]
ALL_TRANSFORMS = SAME_SHAPE_TRANSFORMS + [alr]


def output_for(func, data):
    n, m = data.dims()
    if func is alr:
        return Matrix64(n, m - 1)
    return Matrix64(n, m)


# -- Shape contracts -----------------------------------------------------------

class TestShapes:
    @pytest.mark.parametrize("func", SAME_SHAPE_TRANSFORMS)
    def test_same_shape(self, func, random_compositions):
        data = Matrix64.from_array(random_compositions)
        out = func(data, Matrix64(*data.dims()))
        assert out.dims() == data.dims()

    def test_alr_drops_a_column(self, random_compositions):
        data = Matrix64.from_array(random_compositions)
        out = alr(data, Matrix64(data.rows(), data.cols() - 1))
        assert out.dims() == (data.rows(), data.cols() - 1)

    @pytest.mark.parametrize("func", SAME_SHAPE_TRANSFORMS)
    @pytest.mark.parametrize("shape", [(2, 4), (3, 2), (2, 2), (0, 0)])
    def test_same_shape_mismatch(self, func, shape):
        data = Matrix64.from_rows([[1, 2, 3], [4, 5, 6]])
        out = Matrix64(*shape)
        out.values[...] = 7.0
        with pytest.raises(DimensionMismatchError) as excinfo:
            func(data, out)
        assert np.all(out.values == 7.0)
        assert excinfo.value.expected == (2, 3)

    @pytest.mark.parametrize("shape", [(2, 3), (2, 1), (1, 2)])
    def test_alr_mismatch(self, shape):
        data = Matrix64.from_rows([[1, 2, 3], [4, 5, 6]])
        out = Matrix64(*shape)
        out.values[...] = 7.0
        with pytest.raises(DimensionMismatchError) as excinfo:
            alr(data, out)
        assert np.all(out.values == 7.0)
        assert excinfo.value.expected == (2, 2)
        assert excinfo.value.received == shape

    def test_mismatch_is_a_value_error(self):
        with pytest.raises(ValueError):
            clo(Matrix64(2, 2), Matrix64(2, 3))

    @pytest.mark.parametrize("func", ALL_TRANSFORMS)
    def test_empty(self, func):
        out = func(Matrix64(0, 0), Matrix64(0, 0))
        assert out.dims() == (0, 0)

    @pytest.mark.parametrize("func", ALL_TRANSFORMS)
    def test_returns_out(self, func):
        data = Matrix64.from_rows([[1, 2, 3]])
        out = output_for(func, data)
        assert func(data, out) is out


# -- Closure -------------------------------------------------------------------

class TestClosure:
    def test_values(self):
        out = clo(Matrix64.from_rows([[1, 1, 2], [5, 0, 5]]), Matrix64(2, 3))
        np.testing.assert_allclose(out.values, [[0.25, 0.25, 0.5], [0.5, 0.0, 0.5]])

    def test_rows_sum_to_one(self, random_compositions):
        data = Matrix64.from_array(random_compositions)
        out = clo(data, Matrix64(*data.dims()))
        np.testing.assert_allclose(out.values.sum(axis=1), 1.0, atol=1e-12)

    def test_idempotent(self, random_compositions):
        data = Matrix64.from_array(random_compositions)
        once = clo(data, Matrix64(*data.dims()))
        twice = clo(once, Matrix64(*data.dims()))
        np.testing.assert_allclose(twice.values, once.values, rtol=1e-12)

    def test_in_place(self):
        data = Matrix64.from_rows([[2, 2], [1, 3]])
        clo(data, data)
        assert data.tolist() == [[0.5, 0.5], [0.25, 0.75]]

    def test_input_untouched(self):
        data = Matrix64.from_rows([[2, 2], [1, 3]])
        clo(data, Matrix64(2, 2))
        assert data.tolist() == [[2.0, 2.0], [1.0, 3.0]]


# -- Centered log-ratio --------------------------------------------------------

class TestCLR:
    def test_equal_parts_are_exactly_zero(self):
        out = clr(Matrix64.from_rows([[1, 1, 1]]), Matrix64(1, 3))
        assert out.tolist() == [[0.0, 0.0, 0.0]]

    def test_values(self):
        x = np.array([2.0, 4.0, 8.0])
        expected = np.log(x) - np.log(x).mean()
        out = clr(Matrix64.from_rows([x]), Matrix64(1, 3))
        np.testing.assert_allclose(out[0], expected, atol=1e-12)
        np.testing.assert_allclose(out[0], [-np.log(2), 0.0, np.log(2)], atol=1e-12)

    def test_rows_sum_to_zero(self, random_compositions):
        data = Matrix64.from_array(random_compositions)
        out = clr(data, Matrix64(*data.dims()))
        np.testing.assert_allclose(out.values.sum(axis=1), 0.0, atol=1e-9)

    def test_scale_invariant(self, random_compositions):
        data = Matrix64.from_array(random_compositions)
        scaled = Matrix64.from_array(random_compositions * 17.0)
        np.testing.assert_allclose(
            clr(data, Matrix64(*data.dims())).values,
            clr(scaled, Matrix64(*data.dims())).values,
            atol=1e-9,
        )


# -- Additive log-ratio --------------------------------------------------------

class TestALR:
    def test_values(self):
        out = alr(Matrix64.from_rows([[2, 4, 8]]), Matrix64(1, 2))
        np.testing.assert_allclose(out[0], [np.log(0.25), np.log(0.5)])
        np.testing.assert_allclose(out[0], [-1.3863, -0.6931], atol=1e-4)

    def test_reference_is_last_column(self, random_compositions):
        data = Matrix64.from_array(random_compositions)
        out = alr(data, Matrix64(data.rows(), data.cols() - 1))
        expected = np.log(random_compositions[:, :-1] / random_compositions[:, [-1]])
        np.testing.assert_allclose(out.values, expected, atol=1e-12)
        assert np.all(np.isfinite(out.values))

    def test_single_part_has_no_valid_output(self):
        data = Matrix64.from_rows([[3], [4]])
        out = Matrix64(2, 1)
        with pytest.raises(DimensionMismatchError) as excinfo:
            alr(data, out)
        assert excinfo.value.expected == (2, 0)
        assert out.tolist() == [[0.0], [0.0]]


# -- Centered planar transform -------------------------------------------------

class TestCPT:
    def test_equal_parts_are_exactly_zero(self):
        out = cpt(Matrix64.from_rows([[1, 1, 1]]), Matrix64(1, 3))
        assert out.tolist() == [[0.0, 0.0, 0.0]]

    def test_values(self):
        out = cpt(Matrix64.from_rows([[1, 1, 2]]), Matrix64(1, 3))
        np.testing.assert_allclose(out[0], [0.25 - 1 / 3, 0.25 - 1 / 3, 0.5 - 1 / 3])

    def test_rows_sum_to_zero(self, random_compositions):
        data = Matrix64.from_array(random_compositions)
        out = cpt(data, Matrix64(*data.dims()))
        np.testing.assert_allclose(out.values.sum(axis=1), 0.0, atol=1e-9)

    def test_in_place(self):
        data = Matrix64.from_rows([[1, 3]])
        cpt(data, data)
        np.testing.assert_allclose(data[0], [-0.25, 0.25])


# -- Additive planar transform -------------------------------------------------

class TestAPT:
    def test_values(self):
        out = apt(Matrix64.from_rows([[1, 2, 3]]), Matrix64(1, 3))
        np.testing.assert_allclose(out[0], [1 / 3, 2 / 3, 1.0])

    def test_last_part_excluded_from_sum(self, random_compositions):
        data = Matrix64.from_array(random_compositions)
        out = apt(data, Matrix64(*data.dims()))
        np.testing.assert_allclose(out.values[:, :-1].sum(axis=1), 1.0, atol=1e-12)
        np.testing.assert_allclose(
            out.values[:, -1],
            random_compositions[:, -1] / random_compositions[:, :-1].sum(axis=1),
        )


# -- Numeric degeneracy ----------------------------------------------------------

class TestNumericDegeneracy:
    def test_propagate_is_silent(self):
        data = Matrix64.from_rows([[0, 0], [1, 1]])
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            out = clo(data, Matrix64(2, 2))
        assert np.all(np.isnan(out[0]))
        assert out[1].tolist() == [0.5, 0.5]

    def test_propagate_log_of_zero(self):
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            out = clr(Matrix64.from_rows([[0, 1, 2]]), Matrix64(1, 3))
        assert not np.all(np.isfinite(out.values))

    def test_propagate_negative_part(self):
        out = alr(Matrix64.from_rows([[-1, 2]]), Matrix64(1, 1))
        assert np.isnan(out[0, 0])

    @pytest.mark.parametrize("func", ALL_TRANSFORMS)
    def test_raise(self, func):
        data = Matrix64.from_rows([[0, 0, 0], [1, 2, 3]])
        out = output_for(func, data)
        out.values[...] = 7.0
        with option_context("numeric_degeneracy", "raise"):
            with pytest.raises(NumericDegeneracyError) as excinfo:
                func(data, out)
        assert excinfo.value.operation == func.__name__
        assert np.all(out.values == 7.0)

    def test_raise_is_a_floating_point_error(self):
        set_option("numeric_degeneracy", "raise")
        with pytest.raises(FloatingPointError):
            clr(Matrix64.from_rows([[-1, 1]]), Matrix64(1, 2))

    def test_raise_allows_valid_data(self, random_compositions):
        data = Matrix64.from_array(random_compositions)
        with option_context("numeric_degeneracy", "raise"):
            for func in ALL_TRANSFORMS:
                func(data, output_for(func, data))

    def test_warn(self):
        data = Matrix64.from_rows([[0, 0], [1, 1]])
        with option_context("numeric_degeneracy", "warn"):
            with pytest.warns(RuntimeWarning, match="N=2 non-finite"):
                out = clo(data, Matrix64(2, 2))
        assert np.all(np.isnan(out[0]))


# -- NumPy/Pandas wrappers ---------------------------------------------------------

class TestWrappers:
    def test_closure_dataframe(self):
        X = pd.DataFrame([[1, 3], [2, 2]], index=["s1", "s2"], columns=["a", "b"])
        X_closure = transform_closure(X)
        assert isinstance(X_closure, pd.DataFrame)
        pd.testing.assert_frame_equal(
            X_closure,
            pd.DataFrame([[0.25, 0.75], [0.5, 0.5]], index=["s1", "s2"], columns=["a", "b"]),
        )

    def test_closure_series(self):
        x = pd.Series([1, 3], index=["a", "b"])
        pd.testing.assert_series_equal(transform_closure(x), pd.Series([0.25, 0.75], index=["a", "b"]))

    def test_clr_numpy_1d(self):
        x_clr = transform_clr(np.array([1.0, 1.0, 1.0]))
        assert isinstance(x_clr, np.ndarray)
        assert x_clr.shape == (3,)
        assert x_clr.tolist() == [0.0, 0.0, 0.0]

    def test_clr_numpy_2d(self, random_compositions):
        X_clr = transform_clr(random_compositions)
        assert X_clr.shape == random_compositions.shape
        np.testing.assert_allclose(X_clr.sum(axis=1), 0.0, atol=1e-9)

    def test_alr_dataframe_drops_reference(self):
        X = pd.DataFrame([[2, 4, 8]], index=["s1"], columns=["a", "b", "c"])
        X_alr = transform_alr(X)
        assert list(X_alr.columns) == ["a", "b"]
        assert list(X_alr.index) == ["s1"]
        np.testing.assert_allclose(X_alr.values, [[np.log(0.25), np.log(0.5)]])

    def test_alr_series_drops_reference(self):
        x_alr = transform_alr(pd.Series([2.0, 4.0, 8.0], index=["a", "b", "c"]))
        assert list(x_alr.index) == ["a", "b"]
        np.testing.assert_allclose(x_alr.values, [np.log(0.25), np.log(0.5)])

    def test_alr_empty_dataframe(self):
        X = pd.DataFrame(np.zeros((0, 3)), columns=["a", "b", "c"])
        assert transform_alr(X).shape == (0, 2)

    def test_cpt_and_apt(self):
        X = np.array([[1.0, 1.0, 1.0], [1.0, 2.0, 3.0]])
        np.testing.assert_allclose(transform_cpt(X)[0], [0.0, 0.0, 0.0], atol=1e-15)
        np.testing.assert_allclose(transform_apt(X)[1], [1 / 3, 2 / 3, 1.0])

    def test_input_untouched(self):
        X = np.array([[1.0, 3.0]])
        transform_closure(X)
        assert X.tolist() == [[1.0, 3.0]]

    def test_checks_dimensions(self):
        with pytest.raises(AssertionError):
            transform_clr(np.ones((2, 2, 2)))

    def test_alr_single_component(self):
        with pytest.raises(AssertionError):
            transform_alr(np.array([[3.0], [4.0]]))
