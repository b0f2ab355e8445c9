from __future__ import annotations


def _static_check(cond: bool, msg: str, *args) -> None:
    if not cond:
        raise ValueError(msg.format(*args))


def check_ndim(arr, expected: int, label: str) -> None:
    _static_check(arr.ndim == expected, "{}: expected ndim {}, got shape {}", label, expected, arr.shape)


def check_same_length(n: int, m: int, label: str) -> None:
    _static_check(n == m, "{}: expected length {}, got {}", label, n, m)


def check_in_set(val: str, allowed: tuple[str, ...], label: str) -> None:
    _static_check(val in allowed, "{}: expected one of {}, got {}", label, allowed, val)


__all__ = ["check_ndim", "check_same_length", "check_in_set"]
