"""Unit tests for app.core.security: bcrypt hashing, JWT issue/verify, and role checks."""

import unittest
from datetime import UTC, datetime, timedelta

import jwt

from app.core.config import settings
from app.core.exceptions import InsufficientPermissionsError
from app.core.security import (
    create_access_token,
    decode_access_token,
    ensure_role,
    hash_password,
    verify_password,
)
from app.models.user import Role

USER = {"id": 7, "username": "driver1", "role": "driver", "email": "driver1@example.com"}


class TestPasswordHashing(unittest.TestCase):
    """hash_password produces salted bcrypt hashes that verify_password accepts."""

    def test_hash_is_not_plaintext_and_verifies(self) -> None:
        hashed = hash_password("driver123")
        self.assertNotEqual(hashed, "driver123")
        self.assertTrue(hashed.startswith("$2"))
        self.assertIn("$10$", hashed)
        self.assertTrue(verify_password("driver123", hashed))

    def test_wrong_password_does_not_verify(self) -> None:
        hashed = hash_password("driver123")
        self.assertFalse(verify_password("driver124", hashed))

    def test_salted(self) -> None:
        self.assertNotEqual(hash_password("same"), hash_password("same"))

    def test_malformed_hash_returns_false(self) -> None:
        self.assertFalse(verify_password("anything", "not-a-bcrypt-hash"))


class TestAccessTokens(unittest.TestCase):
    """create_access_token / decode_access_token round trip and failure modes."""

    def test_token_has_three_segments_and_identity_claims(self) -> None:
        token = create_access_token(USER)
        self.assertEqual(token.count("."), 2)
        claims = decode_access_token(token)
        self.assertEqual(claims["id"], 7)
        self.assertEqual(claims["username"], "driver1")
        self.assertEqual(claims["role"], "driver")
        self.assertEqual(claims["email"], "driver1@example.com")
        self.assertIn("iat", claims)
        self.assertIn("exp", claims)

    def test_custom_lifetime(self) -> None:
        claims = decode_access_token(create_access_token(USER, expires_in="2h"))
        self.assertEqual(claims["exp"] - claims["iat"], 7200)

    def test_default_lifetime_from_settings(self) -> None:
        claims = decode_access_token(create_access_token(USER))
        self.assertGreater(claims["exp"], claims["iat"])

    def test_expired_token_rejected(self) -> None:
        past = datetime.now(UTC) - timedelta(hours=2)
        token = jwt.encode(
            {**USER, "iat": past, "exp": past + timedelta(minutes=1)},
            settings.JWT_SECRET.get_secret_value(),
            algorithm=settings.JWT_ALGORITHM,
        )
        with self.assertRaises(jwt.ExpiredSignatureError):
            decode_access_token(token)

    def test_wrong_secret_rejected(self) -> None:
        now = datetime.now(UTC)
        token = jwt.encode(
            {**USER, "iat": now, "exp": now + timedelta(hours=1)},
            "some-other-secret",
            algorithm="HS256",
        )
        with self.assertRaises(jwt.InvalidSignatureError):
            decode_access_token(token)

    def test_tampered_payload_rejected(self) -> None:
        header, _payload, signature = create_access_token(USER).split(".")
        forged = jwt.encode({**USER, "role": "admin"}, "x", algorithm="HS256").split(".")[1]
        with self.assertRaises(jwt.PyJWTError):
            decode_access_token(f"{header}.{forged}.{signature}")

    def test_garbage_rejected(self) -> None:
        with self.assertRaises(jwt.PyJWTError):
            decode_access_token("not-a-token")

    def test_missing_identity_claim_rejected(self) -> None:
        now = datetime.now(UTC)
        token = jwt.encode(
            {"username": "x", "role": "admin", "iat": now, "exp": now + timedelta(hours=1)},
            settings.JWT_SECRET.get_secret_value(),
            algorithm=settings.JWT_ALGORITHM,
        )
        with self.assertRaises(jwt.MissingRequiredClaimError):
            decode_access_token(token)


class TestEnsureRole(unittest.TestCase):
    """ensure_role permits only listed roles and reports required vs current."""

    def test_allowed_role_passes(self) -> None:
        ensure_role("driver", [Role.DRIVER, Role.ADMIN])

    def test_disallowed_role_raises_with_details(self) -> None:
        with self.assertRaises(InsufficientPermissionsError) as ctx:
            ensure_role("driver", [Role.ADMIN])
        self.assertEqual(ctx.exception.status_code, 403)
        self.assertEqual(ctx.exception.details, {"required": ["admin"], "current": "driver"})

    def test_missing_role_raises(self) -> None:
        with self.assertRaises(InsufficientPermissionsError):
            ensure_role(None, ["admin"])


if __name__ == "__main__":
    unittest.main()
