import pytest

from prompt_ab.models import PromptVariant
from prompt_ab.selection import SEED_BUCKETS, assign_variant, select_variant


def pool(*specs):
    return [PromptVariant(id=vid, weight=w) for vid, w in specs]


VARIANTS = pool(("control", 1), ("variant-a", 1), ("variant-b", 1))


class TestSelectVariant:

    @pytest.mark.parametrize("seed", [0, 1, 42, 999_999, 2**32 - 1])
    def test_empty_pool_raises(self, seed):
        with pytest.raises(ValueError):
            select_variant([], seed)

    def test_single_variant_always_selected(self):
        single = pool(("solo", 1))
        for seed in range(50):
            assert select_variant(single, seed).id == "solo"

    def test_deterministic(self):
        assert select_variant(VARIANTS, 123456) is select_variant(VARIANTS, 123456)

    def test_returns_member_for_many_seeds(self):
        for seed in range(0, 1_000_000, 997):
            assert select_variant(VARIANTS, seed) in VARIANTS

    def test_zero_weight_never_selected(self):
        for variants in (pool(("always", 1), ("never", 0)), pool(("never", 0), ("always", 1))):
            for seed in range(0, 1_000_000, 1000):
                assert select_variant(variants, seed).id == "always"

    def test_negative_weight_clamped_to_zero(self):
        variants = pool(("negative", -5), ("positive", 1))
        for seed in range(0, 1_000_000, 1000):
            assert select_variant(variants, seed).id == "positive"

    def test_all_zero_weights_fall_back_to_first(self):
        assert select_variant(pool(("first", 0), ("second", 0)), 0).id == "first"
        assert select_variant(pool(("first", -1), ("second", 0)), 777).id == "first"

    def test_weight_ratio_over_evenly_spread_seeds(self):
        variants = pool(("heavy", 9), ("light", 1))
        samples = 10_000
        step = SEED_BUCKETS // samples
        heavy = sum(
            1 for i in range(samples) if select_variant(variants, i * step).id == "heavy"
        )
        assert 0.85 < heavy / samples < 0.95

    def test_default_weight_is_one(self):
        variants = [PromptVariant(id="a"), PromptVariant(id="b")]
        assert select_variant(variants, 0).id == "a"
        assert select_variant(variants, 750_000).id == "b"

    def test_boundary_goes_to_later_variant(self):
        variants = pool(("a", 1), ("b", 1))
        # position == cumulative weight of "a" is not inside "a"
        assert select_variant(variants, 499_999).id == "a"
        assert select_variant(variants, 500_000).id == "b"

    def test_seed_wraps_at_bucket_count(self):
        variants = pool(("a", 1), ("b", 1))
        assert select_variant(variants, SEED_BUCKETS + 10).id == select_variant(variants, 10).id

    def test_fractional_weights(self):
        variants = pool(("a", 0.25), ("b", 0.75))
        assert select_variant(variants, 200_000).id == "a"
        assert select_variant(variants, 300_000).id == "b"


class TestAssignVariant:
    variants = pool(("control", 1), ("variant-a", 1))

    def test_deterministic_for_same_pair(self):
        first = assign_variant("sess-123", "exp-tone", self.variants)
        for _ in range(10):
            assert assign_variant("sess-123", "exp-tone", self.variants).id == first.id

    def test_different_sessions_reach_both_variants(self):
        seen = {assign_variant(f"session-{i}", "exp-tone", self.variants).id for i in range(50)}
        assert seen == {"control", "variant-a"}
