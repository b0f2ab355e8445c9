from . import checks
from . import elementwise
from . import incgamma
from . import precision
from . import validation

from .elementwise import compute_into
from .incgamma import lower, upper

__all__ = [
    "checks",
    "elementwise",
    "incgamma",
    "precision",
    "validation",
    "compute_into",
    "lower",
    "upper",
]
