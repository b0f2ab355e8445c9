from __future__ import annotations

import argparse
import time

import jax
import jax.numpy as jnp
import numpy as np

import mpmath as mp

from incgammajax import incgamma


def _timeit(fn, iters: int) -> float:
    start = time.perf_counter()
    for _ in range(iters):
        fn()
    return time.perf_counter() - start


def main() -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument("--n", type=int, default=10000)
    parser.add_argument("--repeats", type=int, default=10)
    parser.add_argument("--mp-samples", type=int, default=500)
    parser.add_argument("--seed", type=int, default=0)
    parser.add_argument("--x-hi", type=float, default=20.0)
    parser.add_argument("--s-hi", type=float, default=10.0)
    args = parser.parse_args()

    rng = np.random.default_rng(args.seed)
    x = jnp.asarray(rng.uniform(0.0, args.x_hi, size=args.n), dtype=jnp.float64)
    s = jnp.asarray(rng.uniform(0.05, args.s_hi, size=args.n), dtype=jnp.float64)

    lower_fn = lambda: incgamma.incgamma_lower(x, s).block_until_ready()
    upper_fn = lambda: incgamma.incgamma_upper(x, s).block_until_ready()
    js_fn = jax.jit(jax.scipy.special.gammainc)
    jsc_fn = jax.jit(jax.scipy.special.gammaincc)

    # warmup
    lower_fn()
    upper_fn()
    js_fn(s, x).block_until_ready()
    jsc_fn(s, x).block_until_ready()

    t_lower = _timeit(lower_fn, args.repeats) / args.repeats
    t_upper = _timeit(upper_fn, args.repeats) / args.repeats
    t_js = _timeit(lambda: js_fn(s, x).block_until_ready(), args.repeats) / args.repeats
    t_jsc = _timeit(lambda: jsc_fn(s, x).block_until_ready(), args.repeats) / args.repeats

    m = min(args.mp_samples, args.n)
    xs = np.asarray(x[:m])
    ss = np.asarray(s[:m])
    t0 = time.perf_counter()
    for i in range(m):
        mp.gammainc(mp.mpf(ss[i]), 0, mp.mpf(xs[i]), regularized=True)
    t_mp = (time.perf_counter() - t0) * args.n / m

    err_lower = np.max(np.abs(np.asarray(incgamma.incgamma_lower(x, s)) - np.asarray(js_fn(s, x))))
    err_upper = np.max(np.abs(np.asarray(incgamma.incgamma_upper(x, s)) - np.asarray(jsc_fn(s, x))))

    print(f"n={args.n} repeats={args.repeats}")
    print(f"incgamma_lower        {t_lower * 1e3:9.3f} ms  max|diff| vs jax.scipy={err_lower:.3e}")
    print(f"incgamma_upper        {t_upper * 1e3:9.3f} ms  max|diff| vs jax.scipy={err_upper:.3e}")
    print(f"jax.scipy.gammainc    {t_js * 1e3:9.3f} ms")
    print(f"jax.scipy.gammaincc   {t_jsc * 1e3:9.3f} ms")
    print(f"mpmath (extrapolated) {t_mp * 1e3:9.3f} ms")


if __name__ == "__main__":
    main()
