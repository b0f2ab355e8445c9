"""Elementwise incomplete gamma over array-like inputs.

``compute_into(out, arr, param, accessor)`` writes ``branch(x_i, s_i)`` into
``out[i]``, where ``x_i`` is pulled from ``arr[i]`` through ``accessor`` and
``s_i`` comes from ``param``: a scalar, a numeric array, or an array of
records that also go through ``accessor``. Non-numeric values give NaN at
their index; a length mismatch raises before anything is written.

Lists and tuples are classified by their first element only. A list whose
first entry is a number is read as plain numbers even if later entries are
records (those indices come out NaN).
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Callable, Union

import jax
import numpy as np

from . import checks
from . import incgamma

log = logging.getLogger(__name__)

BRANCHES = ("lower", "upper")

Accessor = Callable[..., Any]


def _identity(value: Any, index: int, slot: int | None = None) -> Any:
    return value


def is_number(v: Any) -> bool:
    if isinstance(v, (bool, np.bool_)):
        return False
    if isinstance(v, (int, float, np.integer, np.floating)):
        return True
    if isinstance(v, (np.ndarray, jax.Array)):
        return v.ndim == 0 and np.dtype(v.dtype).kind in "iuf"
    return False


def _is_typed_array(a: Any) -> bool:
    return isinstance(a, (np.ndarray, jax.Array)) and a.ndim >= 1 and np.dtype(a.dtype).kind in "iuf"


def _is_record(v: Any) -> bool:
    if v is None or isinstance(v, (bool, np.generic, str, bytes, Sequence, np.ndarray, jax.Array)):
        return False
    return not is_number(v)


@dataclass(frozen=True)
class ScalarParam:
    value: float

    def pair(self, arr: Sequence, i: int, accessor: Accessor) -> tuple[Any, Any]:
        return accessor(arr[i], i), self.value


@dataclass(frozen=True)
class NumericArrayParam:
    values: Sequence

    def pair(self, arr: Sequence, i: int, accessor: Accessor) -> tuple[Any, Any]:
        return accessor(arr[i], i, 0), self.values[i]


@dataclass(frozen=True)
class RecordArrayParam:
    records: Sequence

    def pair(self, arr: Sequence, i: int, accessor: Accessor) -> tuple[Any, Any]:
        return accessor(arr[i], i, 0), accessor(self.records[i], i, 1)


@dataclass(frozen=True)
class InvalidParam:
    def pair(self, arr: Sequence, i: int, accessor: Accessor) -> tuple[Any, Any]:
        return None, None


Param = Union[ScalarParam, NumericArrayParam, RecordArrayParam, InvalidParam]


def resolve_param(param: Any, n: int) -> Param:
    """Classify ``param`` once; array params must have length ``n``."""
    if is_number(param):
        return ScalarParam(float(param))
    if isinstance(param, (np.ndarray, jax.Array)) and param.ndim >= 1:
        checks.check_ndim(param, 1, "compute_into.param")
        checks.check_same_length(n, param.shape[0], "compute_into.param")
        if _is_typed_array(param):
            return NumericArrayParam(np.asarray(param, dtype=np.float64))
        param = list(param)
    if isinstance(param, Sequence) and not isinstance(param, (str, bytes)):
        checks.check_same_length(n, len(param), "compute_into.param")
        if n > 0 and _is_record(param[0]):
            return RecordArrayParam(param)
        return NumericArrayParam(param)
    return InvalidParam()


def _gather(kind: Param, arr: Sequence, accessor: Accessor) -> tuple[np.ndarray, np.ndarray]:
    n = len(arr)
    xs = np.full(n, np.nan, dtype=np.float64)
    ss = np.full(n, np.nan, dtype=np.float64)
    for i in range(n):
        v, p = kind.pair(arr, i, accessor)
        if is_number(v) and is_number(p):
            xs[i] = float(v)
            ss[i] = float(p)
    return xs, ss


def compute_into(
    out,
    arr: Sequence,
    param: Any,
    accessor: Accessor | None = None,
    branch: str = "lower",
    regularized: bool = True,
):
    """Fill ``out`` with the incomplete gamma of each element of ``arr``.

    ``accessor(element, index[, slot])`` extracts the number to use; ``slot``
    is 0 for ``arr`` and 1 for records in ``param``. Returns ``out``.
    """
    checks.check_in_set(branch, BRANCHES, "compute_into.branch")
    if accessor is None:
        accessor = _identity
    n = len(arr)
    checks.check_same_length(n, len(out), "compute_into.out")
    kind = resolve_param(param, n)
    log.debug("compute_into: %s over %d elements (%s)", type(kind).__name__, n, branch)

    xs, ss = _gather(kind, arr, accessor)
    if n == 0:
        return out
    fn = incgamma.incgamma_upper if branch == "upper" else incgamma.incgamma_lower
    values = np.asarray(fn(xs, ss, regularized=regularized), dtype=np.float64)
    for i in range(n):
        out[i] = float(values[i])
    return out


__all__ = [
    "BRANCHES",
    "ScalarParam",
    "NumericArrayParam",
    "RecordArrayParam",
    "InvalidParam",
    "is_number",
    "resolve_param",
    "compute_into",
]
