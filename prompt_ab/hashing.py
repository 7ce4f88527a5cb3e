"""
Deterministic string hashing for variant bucketing.
"""

DJB2_SEED = 5381


def hash_string(value: str) -> int:
    """
    djb2 (xor variant) hash of a string as an unsigned 32-bit integer.

    The input is walked by UTF-16 code unit so that the result is identical
    to JavaScript clients bucketing the same keys. Characters outside the BMP
    therefore contribute two surrogate units.

    This is a stable bucketing hash only. It is not uniform, not collision
    resistant, and must not be used where unpredictability matters.
    """
    acc = DJB2_SEED
    data = value.encode("utf-16-le", "surrogatepass")
    for i in range(0, len(data), 2):
        code_unit = data[i] | (data[i + 1] << 8)
        acc = ((acc * 33) ^ code_unit) & 0xFFFFFFFF
    return acc
