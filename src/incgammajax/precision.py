from __future__ import annotations

from contextlib import contextmanager

_EPS = 1e-12
_MAX_ITER = 10000


def set_eps(eps: float) -> None:
    global _EPS
    eps = float(eps)
    if not eps > 0.0:
        raise ValueError(f"precision.eps: expected a positive tolerance, got {eps}")
    _EPS = eps


def set_max_iter(max_iter: int) -> None:
    global _MAX_ITER
    max_iter = int(max_iter)
    if max_iter < 1:
        raise ValueError(f"precision.max_iter: expected at least 1, got {max_iter}")
    _MAX_ITER = max_iter


def get_eps() -> float:
    return _EPS


def get_max_iter() -> int:
    return _MAX_ITER


@contextmanager
def workeps(eps: float):
    old = _EPS
    set_eps(eps)
    try:
        yield
    finally:
        set_eps(old)


@contextmanager
def workiter(max_iter: int):
    old = _MAX_ITER
    set_max_iter(max_iter)
    try:
        yield
    finally:
        set_max_iter(old)


def resolve(eps: float | None, max_iter: int | None) -> tuple[float, int]:
    e = _EPS if eps is None else float(eps)
    n = _MAX_ITER if max_iter is None else int(max_iter)
    if not e > 0.0:
        raise ValueError(f"precision.eps: expected a positive tolerance, got {e}")
    if n < 1:
        raise ValueError(f"precision.max_iter: expected at least 1, got {n}")
    return e, n


__all__ = [
    "set_eps",
    "set_max_iter",
    "get_eps",
    "get_max_iter",
    "workeps",
    "workiter",
    "resolve",
]
