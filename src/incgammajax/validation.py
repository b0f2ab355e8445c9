"""Switch for the mpmath parity tests: set ``INCGAMMAJAX_RUN_PARITY=1``."""

import os


def parity_enabled() -> bool:
    return os.getenv("INCGAMMAJAX_RUN_PARITY", "0") == "1"


__all__ = ["parity_enabled"]
