"""
Weighted variant selection.

The "randomness" here is fully deterministic: the seed comes from hashing the
session key and experiment id, so the same pair always lands in the same
bucket. Do not use it as a source of entropy or for security-sensitive
bucketing.
"""
from typing import Sequence

from prompt_ab.hashing import hash_string
from prompt_ab.models import PromptVariant

# Seed-to-position granularity: one part in a million
SEED_BUCKETS = 1_000_000


def select_variant(variants: Sequence[PromptVariant], seed: int) -> PromptVariant:
    """
    Select a variant from a weighted pool using a pre-computed numeric seed.

    The seed is mapped into [0, total_weight) and the cumulative weight
    distribution is walked in list order, so earlier variants win ties.

    Args:
        variants: Ordered variant pool
        seed: Non-negative integer seed

    Returns:
        The selected variant

    Raises:
        ValueError: if the pool is empty. The registry guarantees non-empty
            pools, so this indicates a wiring bug.
    """
    if not variants:
        raise ValueError("select_variant: variants must not be empty")

    weights = [v.effective_weight for v in variants]
    total_weight = sum(weights)

    # All weights zero: first variant
    if total_weight <= 0:
        return variants[0]

    position = ((seed % SEED_BUCKETS) / SEED_BUCKETS) * total_weight

    cumulative = 0
    for variant, weight in zip(variants, weights):
        cumulative += weight
        if position < cumulative:
            return variant

    # Floating-point edge case
    return variants[-1]


def assign_variant(
    session_key: str,
    experiment_id: str,
    variants: Sequence[PromptVariant],
) -> PromptVariant:
    """Assign a variant for a session/experiment pair. Same pair, same variant."""
    seed = hash_string(f"{session_key}:{experiment_id}")
    return select_variant(variants, seed)
