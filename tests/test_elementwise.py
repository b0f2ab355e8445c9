import math

import jax.numpy as jnp
import numpy as np
import pytest

from incgammajax import elementwise, incgamma
from incgammajax.elementwise import compute_into


from tests._test_checks import _check, _close
def _key_accessor(d, i, slot=0):
    return d["x"] if slot == 0 else d["s"]


def test_scalar_param():
    out = [0.0, 0.0, 0.0]
    res = compute_into(out, [0, 1, 2], 1)
    _check(res is out)
    _check(out[0] == 0.0)
    _close(out, [0.0, 0.6321205588285577, 0.8646647167633873], rtol=1e-11)


def test_scalar_param_passes_two_args_to_accessor():
    calls = []

    def accessor(*args):
        calls.append(args)
        return args[0]

    compute_into([0.0, 0.0], [0.5, 1.5], 2.0, accessor)
    _check(calls == [(0.5, 0), (1.5, 1)])


def test_numeric_list_param():
    out = [0.0, 0.0]
    compute_into(out, [1.0, 2.0], [1.0, 2.0])
    _close(out, [incgamma.lower(1.0, 1.0), incgamma.lower(2.0, 2.0)])


def test_typed_array_param_and_output():
    out = np.zeros(3)
    compute_into(out, [0.5, 1.0, 4.0], np.array([0.5, 0.5, 0.5]), branch="upper")
    _close(out, [math.erfc(math.sqrt(x)) for x in (0.5, 1.0, 4.0)], rtol=1e-10)


def test_jax_array_param():
    out = [0.0, 0.0]
    compute_into(out, [2.0, 3.0], jnp.array([1.0, 2.0]))
    _close(out, [incgamma.lower(2.0, 1.0), incgamma.lower(3.0, 2.0)])


def test_record_array_param():
    arr = [{"x": 1.0}, {"x": 2.0}]
    param = [{"s": 1.0}, {"s": 2.0}]
    out = [0.0, 0.0]
    compute_into(out, arr, param, _key_accessor)
    _close(out, [incgamma.lower(1.0, 1.0), incgamma.lower(2.0, 2.0)])


def test_record_accessor_slots():
    calls = []

    def accessor(d, i, slot):
        calls.append((i, slot))
        return _key_accessor(d, i, slot)

    compute_into([0.0], [{"x": 1.0}], [{"s": 3.0}], accessor)
    _check(calls == [(0, 0), (0, 1)])


def test_upper_branch_non_regularized():
    out = [0.0]
    compute_into(out, [1.0], 0.5, branch="lower", regularized=False)
    _close(out, [math.sqrt(math.pi) * math.erf(1.0)], rtol=1e-10)
    compute_into(out, [2.0], 1.0, branch="upper", regularized=False)
    _close(out, [math.exp(-2.0)], rtol=1e-11)


def test_length_mismatch_raises_before_writing():
    out = [7.0, 7.0, 7.0]
    with pytest.raises(ValueError):
        compute_into(out, [1.0, 2.0, 3.0], [1.0, 2.0])
    _check(out == [7.0, 7.0, 7.0])
    with pytest.raises(ValueError):
        compute_into(out, [1.0, 2.0, 3.0], np.ones(4))
    _check(out == [7.0, 7.0, 7.0])


def test_multidim_param_raises_before_writing():
    out = [7.0] * 6
    with pytest.raises(ValueError):
        compute_into(out, list(range(6)), np.ones((2, 3)))
    _check(out == [7.0] * 6)
    with pytest.raises(ValueError):
        compute_into(out, list(range(6)), jnp.ones((6, 1)))
    _check(out == [7.0] * 6)


def test_output_length_mismatch_raises():
    with pytest.raises(ValueError):
        compute_into([0.0], [1.0, 2.0], 1.0)


def test_unknown_branch_raises():
    with pytest.raises(ValueError):
        compute_into([0.0], [1.0], 1.0, branch="middle")


def test_non_numeric_accessor_result_is_nan():
    def accessor(v, i, slot=0):
        return "oops" if i == 1 else v

    out = [0.0, 0.0, 0.0]
    compute_into(out, [1.0, 2.0, 2.0], 1.0, accessor)
    _check(math.isnan(out[1]))
    _close([out[0], out[2]], [incgamma.lower(1.0, 1.0), incgamma.lower(2.0, 1.0)])


def test_non_numeric_entries_are_nan():
    out = [0.0, 0.0, 0.0, 0.0]
    compute_into(out, [1.0, None, True, 2.0], [1.0, 1.0, 1.0, "s"])
    _check(not math.isnan(out[0]))
    _check(all(math.isnan(v) for v in out[1:]))


def test_invalid_domain_is_nan_not_error():
    out = [0.0, 0.0]
    compute_into(out, [-1.0, 1.0], [2.0, 0.0])
    _check(math.isnan(out[0]) and math.isnan(out[1]))


def test_non_array_param_fills_nan():
    out = [1.0, 2.0]
    compute_into(out, [1.0, 2.0], "shape")
    _check(all(math.isnan(v) for v in out))
    compute_into(out, [1.0, 2.0], {"s": 1.0})
    _check(all(math.isnan(v) for v in out))


def test_first_element_decides_param_kind():
    # a numeric first entry marks the list as plain numbers; the record at
    # index 1 is then not run through the accessor
    out = [0.0, 0.0]
    compute_into(out, [{"x": 1.0}, {"x": 2.0}], [1.0, {"s": 2.0}], _key_accessor)
    _close(out[0], incgamma.lower(1.0, 1.0))
    _check(math.isnan(out[1]))


def test_empty_input():
    out = []
    _check(compute_into(out, [], [1.0]) is out)
    _check(out == [])


def test_resolve_param_variants():
    _check(isinstance(elementwise.resolve_param(2, 3), elementwise.ScalarParam))
    _check(isinstance(elementwise.resolve_param(np.float32(2.0), 3), elementwise.ScalarParam))
    _check(isinstance(elementwise.resolve_param(np.ones(3), 3), elementwise.NumericArrayParam))
    _check(isinstance(elementwise.resolve_param([1.0, 2.0], 2), elementwise.NumericArrayParam))
    _check(isinstance(elementwise.resolve_param(({"s": 1},), 1), elementwise.RecordArrayParam))
    _check(isinstance(elementwise.resolve_param(True, 1), elementwise.InvalidParam))
    _check(isinstance(elementwise.resolve_param(None, 1), elementwise.InvalidParam))


@pytest.mark.parametrize(
    "v,expected",
    [(1, True), (1.5, True), (np.int32(3), True), (np.float64("nan"), True), (True, False), ("1", False), (None, False)],
)
def test_is_number(v, expected):
    _check(elementwise.is_number(v) is expected)


def test_invalid_param_pairs_are_empty():
    kind = elementwise.resolve_param("shape", 2)
    _check(kind.pair([1.0, 2.0], 1, elementwise._identity) == (None, None))
