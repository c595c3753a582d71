"""
Geoturismo Backend — Credential Hashing Tests
"""

from geoturismo.services.passwords import hash_password, verify_password


class TestPasswords:

    def test_hash_is_not_plaintext(self):
        hashed = hash_password("secreto123")
        assert hashed != "secreto123"
        assert hashed.startswith("$2")

    def test_same_password_gets_different_salts(self):
        assert hash_password("secreto123") != hash_password("secreto123")

    def test_verify_matches(self):
        assert verify_password("secreto123", hash_password("secreto123"))

    def test_verify_rejects_wrong_password(self):
        assert not verify_password("otra", hash_password("secreto123"))

    def test_verify_handles_non_ascii(self):
        assert verify_password("contraseña-ñ", hash_password("contraseña-ñ"))

    def test_malformed_hash_never_matches(self):
        assert not verify_password("secreto123", "not-a-bcrypt-hash")
