"""Tests for keyed password hashing."""

import hashlib
import hmac

import pytest

from src.notevault.config import Settings
from src.notevault.core.errors import ConfigurationError
from src.notevault.security.password import PasswordHasher, generate_salt, get_password_hasher


def test_generate_salt_is_16_random_bytes_hex():
    first, second = generate_salt(), generate_salt()
    assert len(first) == 32
    bytes.fromhex(first)
    assert first != second


def test_hash_is_hmac_sha256_of_password_and_salt():
    hasher = PasswordHasher("server-secret")
    expected = hmac.new(b"server-secret", b"Secure@Pass1" + b"abcd", hashlib.sha256).hexdigest()
    assert hasher.hash("Secure@Pass1", "abcd") == expected


def test_same_password_different_salt_gives_different_hash():
    hasher = PasswordHasher("server-secret")
    assert hasher.hash("Secure@Pass1", generate_salt()) != hasher.hash("Secure@Pass1", generate_salt())


def test_hash_depends_on_server_secret():
    salt = generate_salt()
    assert PasswordHasher("one").hash("pw", salt) != PasswordHasher("two").hash("pw", salt)


def test_verify():
    hasher = PasswordHasher("server-secret")
    digest, salt = hasher.hash_new("Secure@Pass1")
    assert hasher.verify("Secure@Pass1", salt, digest)
    assert not hasher.verify("Secure@Pass2", salt, digest)
    assert not hasher.verify("Secure@Pass1", generate_salt(), digest)


@pytest.mark.parametrize("secret", [None, ""])
def test_missing_secret_is_a_configuration_error(secret):
    with pytest.raises(ConfigurationError):
        PasswordHasher(secret)


def test_get_password_hasher_uses_settings():
    settings = Settings(password_hash_secret="from-settings")
    hasher = get_password_hasher(settings)
    assert hasher.hash("pw", "salt") == PasswordHasher("from-settings").hash("pw", "salt")
