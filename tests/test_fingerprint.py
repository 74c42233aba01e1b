"""Tests del fingerprint del cliente."""
import hashlib

from app.services.fingerprint import generate_fingerprint


def test_fingerprint_is_sha256_of_ip_and_user_agent():
    expected = hashlib.sha256(b"10.0.0.1Mozilla/5.0").hexdigest()
    assert generate_fingerprint("10.0.0.1", "Mozilla/5.0", "127.0.0.1") == expected


def test_fingerprint_falls_back_to_remote_addr():
    assert generate_fingerprint(None, "ua", "127.0.0.1") == generate_fingerprint("127.0.0.1", "ua")


def test_missing_headers_degrade_to_empty_strings():
    fp = generate_fingerprint(None, None, None)
    assert fp == hashlib.sha256(b"").hexdigest()
    assert len(fp) == 64


def test_fingerprint_is_deterministic_and_user_agent_sensitive():
    a = generate_fingerprint("1.2.3.4", "agent-a")
    assert a == generate_fingerprint("1.2.3.4", "agent-a")
    assert a != generate_fingerprint("1.2.3.4", "agent-b")
