"""Decay logic for pheromone layers.

Operates on the raw NumPy arrays inside ``PheromoneLayer`` objects, but
only at the indices listed in the field's sparse ``active`` set.
Separated from ``fields.py`` so the decay rule can be swapped
independently of storage.
"""

from __future__ import annotations

import numpy as np

from antsim.errors import InvalidConfigurationError
from antsim.pheromones.fields import PheromoneField


def decay_factor(decay_rate: int, horizon: float) -> float:
    """Derive the per-tick multiplier from a save file's ``decay_rate``.

    ``factor = 1 - 1 / (decay_rate * horizon)``, so a larger rate means
    slower fading.

    Args:
        decay_rate: Integer rate from the environment (≥ 1).
        horizon: Tuning constant from the simulation config (≥ 1).

    Raises:
        InvalidConfigurationError: If either argument is below 1.
    """
    if decay_rate < 1:
        msg = f"decay_rate must be >= 1, got {decay_rate}"
        raise InvalidConfigurationError(msg)
    if horizon < 1:
        msg = f"decay_horizon must be >= 1, got {horizon}"
        raise InvalidConfigurationError(msg)
    return 1.0 - 1.0 / (decay_rate * horizon)


def decay(field: PheromoneField, factor: float) -> None:
    """Fade every active cell by ``factor`` in-place.

    Channel values that fall below ``field.floor`` snap to zero, and
    cells whose channels are both zero leave the sparse index.  Values
    never increase and never go negative.

    Args:
        field: The pheromone field to decay.
        factor: Multiplier in ``[0, 1]``.
    """
    if not field.active:
        return

    idx = field.active_indices()
    empty = np.ones(len(idx), dtype=bool)
    for layer in field.layers.values():
        values = layer.grid[idx] * factor
        values[values < field.floor] = 0.0
        layer.grid[idx] = values
        empty &= values == 0.0

    for index in idx[empty]:
        field.active.discard(int(index))
