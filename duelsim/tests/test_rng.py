"""
Tests for the seeded RNG.

Tests:
- Seed hashing
- The LCG step
- Derived helpers (next_int, choice, shuffle)
"""

from ..engine_core.rng import SeededRandom, hash_seed


class TestHashSeed:
    """Tests for string seed hashing."""

    def test_empty_seed(self):
        """An empty seed hashes to zero."""
        assert hash_seed("") == 0

    def test_known_values(self):
        """Hash follows h = h * 31 + ord(ch)."""
        assert hash_seed("a") == 97
        assert hash_seed("ab") == 97 * 31 + 98

    def test_result_is_non_negative_32_bit(self):
        """Long seeds wrap to 32 bits and are made non-negative."""
        value = hash_seed("a fairly long seed that overflows 32 bits many times over")
        assert 0 <= value <= 2**31


class TestSeededRandom:
    """Tests for SeededRandom."""

    def test_first_step(self):
        """One LCG step from the hashed seed."""
        rng = SeededRandom("a")
        value = rng.next()
        assert rng.state == (97 * 9301 + 49297) % 233280
        assert value == rng.state / 233280

    def test_same_seed_same_sequence(self):
        """Identical seeds give identical sequences."""
        a = SeededRandom("game-42")
        b = SeededRandom("game-42")
        assert [a.next() for _ in range(50)] == [b.next() for _ in range(50)]

    def test_different_seeds_differ(self):
        """Different seeds diverge."""
        a = SeededRandom("a")
        b = SeededRandom("b")
        assert a.next() != b.next()

    def test_integer_seed_matches_string(self):
        """Integer seeds are treated as their decimal string."""
        assert SeededRandom(42).next() == SeededRandom("42").next()

    def test_next_in_unit_interval(self):
        """next() stays in [0, 1)."""
        rng = SeededRandom("range")
        for _ in range(1000):
            value = rng.next()
            assert 0 <= value < 1

    def test_next_int_bounds(self):
        """next_int is inclusive of min, exclusive of max."""
        rng = SeededRandom("ints")
        values = {rng.next_int(2, 5) for _ in range(500)}
        assert values <= {2, 3, 4}
        assert len(values) == 3

    def test_choice_empty(self):
        """choice() of nothing is None."""
        assert SeededRandom("x").choice([]) is None

    def test_choice_single(self):
        """choice() of one item is that item."""
        assert SeededRandom("x").choice(["only"]) == "only"

    def test_shuffle_is_permutation(self):
        """shuffle() returns a reordered copy without touching the input."""
        items = list(range(20))
        shuffled = SeededRandom("deck").shuffle(items)
        assert items == list(range(20))
        assert sorted(shuffled) == items

    def test_shuffle_deterministic(self):
        """Same seed, same order."""
        items = list(range(20))
        assert SeededRandom("deck").shuffle(items) == SeededRandom("deck").shuffle(items)
