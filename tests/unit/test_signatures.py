from random import Random

from tasting.services.signatures import SIGNATURE_ALPHABET, generate_signature, is_well_formed


def test_signature_shape():
    signature = generate_signature(Random(7))

    assert len(signature) == 6
    assert set(signature) <= set(SIGNATURE_ALPHABET)


def test_seeded_source_is_deterministic():
    assert generate_signature(Random(42)) == generate_signature(Random(42))


def test_default_source_produces_varied_signatures():
    signatures = {generate_signature() for _ in range(50)}
    assert len(signatures) > 45


def test_alphabet_is_lowercase_alphanumeric():
    assert SIGNATURE_ALPHABET == "abcdefghijklmnopqrstuvwxyz0123456789"


def test_well_formed_checks_length_only():
    assert is_well_formed("abc123")
    assert not is_well_formed("abc12")
    assert not is_well_formed("abc1234")
    assert not is_well_formed("")
    assert not is_well_formed(None)
