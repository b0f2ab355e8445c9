from __future__ import annotations

import argparse

import jax.numpy as jnp
import numpy as np

import mpmath as mp

from incgammajax import incgamma


def mp_lower(x: float, s: float, regularized: bool) -> float:
    return float(mp.gammainc(mp.mpf(s), 0, mp.mpf(x), regularized=regularized))


def mp_upper(x: float, s: float, regularized: bool) -> float:
    return float(mp.gammainc(mp.mpf(s), mp.mpf(x), mp.inf, regularized=regularized))


def _rel_err(got: np.ndarray, ref: np.ndarray) -> np.ndarray:
    denom = np.maximum(np.abs(ref), 1e-300)
    return np.abs(got - ref) / denom


def main() -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument("--samples", type=int, default=2000)
    parser.add_argument("--seed", type=int, default=0)
    parser.add_argument("--dps", type=int, default=50)
    parser.add_argument("--x-hi", type=float, default=50.0)
    parser.add_argument("--s-lo", type=float, default=0.05)
    parser.add_argument("--s-hi", type=float, default=30.0)
    parser.add_argument("--raw", action="store_true", help="compare the non-regularized functions")
    args = parser.parse_args()

    rng = np.random.default_rng(args.seed)
    n = args.samples
    mp.mp.dps = args.dps
    regularized = not args.raw

    xs = rng.uniform(0.0, args.x_hi, size=n)
    ss = rng.uniform(args.s_lo, args.s_hi, size=n)

    got = {
        "lower": np.asarray(incgamma.incgamma_lower(jnp.asarray(xs), jnp.asarray(ss), regularized=regularized)),
        "upper": np.asarray(incgamma.incgamma_upper(jnp.asarray(xs), jnp.asarray(ss), regularized=regularized)),
    }
    ref = {
        "lower": np.array([mp_lower(x, s, regularized) for x, s in zip(xs, ss)]),
        "upper": np.array([mp_upper(x, s, regularized) for x, s in zip(xs, ss)]),
    }

    label = "regularized" if regularized else "non-regularized"
    print(f"incgamma vs mpmath ({label}, dps={args.dps}, samples={n}):")
    for name in ("lower", "upper"):
        err = _rel_err(got[name], ref[name])
        worst = int(np.argmax(err))
        print(
            f"{name:6s} median={np.median(err):.3e} p95={np.percentile(err, 95):.3e} "
            f"max={err[worst]:.3e} at x={xs[worst]:.6g} s={ss[worst]:.6g}"
        )

    total = got["lower"] + got["upper"]
    target = np.ones(n) if regularized else np.array([float(mp.gamma(s)) for s in ss])
    ident = _rel_err(total, target)
    print(f"identity max rel err={np.max(ident):.3e}")


if __name__ == "__main__":
    main()
