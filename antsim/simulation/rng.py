"""Random number source for the tick loop.

Every tick draws from a fresh NumPy ``Generator`` seeded with the
environment's current seed, and the seed then advances by one.  A run
is therefore a pure function of the document it started from, and a
snapshot taken mid-run (which records the advanced seed) resumes
exactly where the original run would have gone.
"""

from __future__ import annotations

import numpy as np
from numpy.random import Generator


def tick_generator(seed: int) -> Generator:
    """Return the generator for the tick whose seed is ``seed``."""
    return np.random.default_rng(seed)
