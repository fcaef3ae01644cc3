"""Unit tests for the algorithm registry."""

import pytest

from dilikey.lib import registry
from dilikey.lib.errors import LengthMismatch, UnsupportedAlgorithm
from dilikey.lib.registry import SecurityLevel


def test_levels_are_ascending():
    assert registry.levels() == [
        SecurityLevel.LEVEL2,
        SecurityLevel.LEVEL3,
        SecurityLevel.LEVEL5,
    ]


def test_keypair_is_public_plus_secret(level):
    params = registry.lengths_for(level)
    assert params.keypair_len == params.public_len + params.secret_len


def test_known_lengths():
    """The byte contracts of round 3 Dilithium."""
    assert registry.lengths_for(SecurityLevel.LEVEL2).keypair_len == 3840
    assert registry.lengths_for(SecurityLevel.LEVEL3).keypair_len == 5952
    assert registry.lengths_for(SecurityLevel.LEVEL5).keypair_len == 7456
    assert registry.lengths_for(SecurityLevel.LEVEL3).signature_len == 3293


def test_oid_round_trip(level):
    assert registry.level_for(registry.oid_for(level)) == level


def test_oids_are_distinct():
    oids = {registry.oid_for(level) for level in registry.levels()}
    assert len(oids) == 3


def test_unknown_oid():
    with pytest.raises(UnsupportedAlgorithm):
        registry.level_for("1.2.840.113549.1.1.1")


@pytest.mark.parametrize("role", ["keypair", "secret", "public", "signature"])
def test_level_for_length(level, role):
    n = registry.lengths_for(level).length_of(role)
    assert registry.level_for_length(n, role) == level


def test_level_for_length_not_found():
    with pytest.raises(LengthMismatch) as exc_info:
        registry.level_for_length(1234)
    assert exc_info.value.actual == 1234


def test_unknown_role():
    with pytest.raises(ValueError):
        registry.lengths_for(SecurityLevel.LEVEL2).length_of("ciphertext")


def test_nested_prefix_round_trip(level):
    prefix = registry.nested_prefix_for(level)
    assert len(prefix) == registry.NESTED_PREFIX_LEN
    assert registry.level_for_nested_prefix(prefix) == level


def test_nested_prefix_matches_keypair_length(level):
    """The sub-tag happens to be the DER long-form length of the key pair."""
    prefix = registry.nested_prefix_for(level)
    assert int.from_bytes(prefix[2:], "big") == registry.lengths_for(level).keypair_len


@pytest.mark.parametrize(
    "token,expected",
    [
        ("2", SecurityLevel.LEVEL2),
        ("dil2", SecurityLevel.LEVEL2),
        ("Dilithium3", SecurityLevel.LEVEL3),
        ("DIL5", SecurityLevel.LEVEL5),
        (5, SecurityLevel.LEVEL5),
        (SecurityLevel.LEVEL3, SecurityLevel.LEVEL3),
    ],
)
def test_parse_level(token, expected):
    assert registry.parse_level(token) == expected


@pytest.mark.parametrize("token", ["4", "dilithium4", "falcon512", ""])
def test_parse_level_rejects_unknown(token):
    with pytest.raises(UnsupportedAlgorithm, match="does not support this algorithm"):
        registry.parse_level(token)
