"""Scalar timing values drawn from declarative distribution specs.

Each distribution type is a sampler registered in
:data:`~trialforge.registry.DISTRIBUTION_REGISTRY`; new types can be
registered without touching :func:`sample_from_distribution`.
"""

from __future__ import annotations

from typing import Any, Optional
import warnings

import numpy as np

from trialforge.errors import DistributionFallbackWarning
from trialforge.registry import DISTRIBUTION_REGISTRY


def make_rng(seed: Optional[int] = None) -> np.random.Generator:
    """Create the generator threaded through every sampling call.

    ``seed=None`` draws fresh OS entropy, so repeated calls differ.
    """
    return np.random.default_rng(seed)


@DISTRIBUTION_REGISTRY("fixed")
def sample_fixed(spec: Any, rng: np.random.Generator) -> float:
    return spec.value


@DISTRIBUTION_REGISTRY("uniform")
def sample_uniform(spec: Any, rng: np.random.Generator) -> float:
    """Uniform draw between ``params[0]`` and ``params[1]`` in either order."""
    params = spec.params
    if not params or len(params) < 2:
        warnings.warn(
            "uniform distribution requires params [min, max], "
            f"falling back to value {spec.value}",
            DistributionFallbackWarning,
            stacklevel=3,
        )
        return spec.value
    low = min(params[0], params[1])
    high = max(params[0], params[1])
    return float(low + rng.random() * (high - low))


@DISTRIBUTION_REGISTRY("choice")
def sample_choice(spec: Any, rng: np.random.Generator) -> float:
    """One element of ``params``, each index equally likely."""
    params = spec.params
    if not params:
        warnings.warn(
            "choice distribution requires non-empty params, "
            f"falling back to value {spec.value}",
            DistributionFallbackWarning,
            stacklevel=3,
        )
        return spec.value
    return params[int(rng.integers(len(params)))]


def sample_from_distribution(spec: Any, rng: np.random.Generator) -> float:
    """Draw one value from ``spec``.

    Args:
        spec: Object with ``type``, ``value`` and ``params`` attributes,
            normally a :class:`~trialforge.config.schema.DistributionSpec`.
        rng: Source of randomness.

    Returns:
        The sampled value, in the same unit as ``spec.value`` (ms).

    Raises:
        UnknownDistributionType: If ``spec.type`` is not registered.
    """
    sampler = DISTRIBUTION_REGISTRY.get(spec.type)
    return sampler(spec, rng)
