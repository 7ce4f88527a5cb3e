from prompt_ab.hashing import DJB2_SEED, hash_string


def test_empty_string_is_the_seed():
    assert hash_string("") == DJB2_SEED == 5381


def test_known_value():
    # (5381 * 33) ^ ord("a")
    assert hash_string("a") == 177604


def test_non_negative_32bit_integer():
    for value in ["hello", "session-abc:experiment-1", "x" * 500, "ünïcödé"]:
        h = hash_string(value)
        assert isinstance(h, int)
        assert 0 <= h <= 0xFFFFFFFF


def test_deterministic():
    assert hash_string("session-abc:experiment-1") == hash_string("session-abc:experiment-1")


def test_different_inputs_differ():
    assert hash_string("session-abc:experiment-1") != hash_string("session-xyz:experiment-1")
    assert hash_string("session-abc:experiment-1") != hash_string("session-abc:experiment-2")


def test_astral_characters_hash_as_surrogate_pairs():
    expected = DJB2_SEED
    for unit in (0xD83D, 0xDE00):  # U+1F600 in UTF-16
        expected = ((expected * 33) ^ unit) & 0xFFFFFFFF
    assert hash_string("\U0001F600") == expected
