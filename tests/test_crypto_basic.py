import re

import pytest

from gauthenticator.crypto import crypto_utils

BASE32_TEXT = re.compile(r"^[A-Z2-7]+$")


def test_create_secret_length_and_alphabet():
    for length in (16, 17, 32, 64, 127, 128):
        secret = crypto_utils.create_secret(length)
        assert len(secret) == length
        assert BASE32_TEXT.match(secret)


def test_create_secret_default_length():
    assert len(crypto_utils.create_secret()) == crypto_utils.DEFAULT_SECRET_LENGTH


def test_create_secret_is_random():
    assert crypto_utils.create_secret(32) != crypto_utils.create_secret(32)


@pytest.mark.parametrize("length", [0, 15, 129, -16, 16.0, "16", True])
def test_create_secret_rejects_bad_length(length):
    with pytest.raises(crypto_utils.InvalidLength):
        crypto_utils.create_secret(length)


def test_create_secret_reports_missing_random_source(monkeypatch):
    def broken_urandom(size):
        raise OSError("no entropy")

    monkeypatch.setattr(crypto_utils.os, "urandom", broken_urandom)
    with pytest.raises(crypto_utils.InsecureRandomUnavailable):
        crypto_utils.create_secret(16)


def test_create_secret_maps_random_bytes_through_encoder(monkeypatch):
    monkeypatch.setattr(crypto_utils.os, "urandom", lambda size: bytes(range(size)))
    assert crypto_utils.create_secret(16) == "ABCDEFGHIJKLMNOP"


def test_timing_safe_equals():
    assert crypto_utils.timing_safe_equals("123456", "123456")
    assert crypto_utils.timing_safe_equals("", "")
    assert not crypto_utils.timing_safe_equals("123456", "123457")
    assert not crypto_utils.timing_safe_equals("123456", "023456")
    assert not crypto_utils.timing_safe_equals("123456", "12345")
    assert not crypto_utils.timing_safe_equals("12345", "123456")


class _CountingBytes(bytes):
    visited = 0

    def __iter__(self):
        for byte in bytes.__iter__(self):
            type(self).visited += 1
            yield byte


class _CountingText(str):
    def encode(self, *args, **kwargs):
        return _CountingBytes(str.encode(self, *args, **kwargs))


@pytest.mark.parametrize("other", ["023456", "123406", "123450", "000000"])
def test_timing_safe_equals_scans_every_byte(other):
    _CountingBytes.visited = 0
    assert not crypto_utils.timing_safe_equals(_CountingText("123456"), other)
    assert _CountingBytes.visited == 6
