from datetime import datetime, timedelta

import httpx
import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from jose import jwk, jwt

from hoodsgoods.config import settings
from hoodsgoods.deps import get_identity_verifier
from hoodsgoods.errors import AuthenticationError
from hoodsgoods.main import app
from hoodsgoods.services.identity import IdentityVerifier

pytestmark = pytest.mark.anyio

JWKS_URL = "https://idp.test/.well-known/jwks.json"
ISSUER = "https://idp.test/"
AUDIENCE = "hoodsgoods-api"


def rsa_key(kid: str) -> tuple[bytes, dict]:
    """Private PEM for signing and the matching public JWK."""
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    private_pem = key.private_bytes(
        serialization.Encoding.PEM, serialization.PrivateFormat.PKCS8, serialization.NoEncryption()
    )
    public_pem = key.public_key().public_bytes(
        serialization.Encoding.PEM, serialization.PublicFormat.SubjectPublicKeyInfo
    )
    public_jwk = jwk.construct(public_pem, algorithm="RS256").to_dict()
    public_jwk["kid"] = kid
    return private_pem, public_jwk


def sign(private_pem: bytes, kid: str, **overrides) -> str:
    claims = {
        "sub": "auth0|user-1",
        "email": "thandi@example.com",
        "iss": ISSUER,
        "aud": AUDIENCE,
        "exp": datetime.utcnow() + timedelta(hours=1),
    }
    claims.update(overrides)
    return jwt.encode(claims, private_pem, algorithm="RS256", headers={"kid": kid})


class JWKSServer:
    """Serves a sequence of key sets, repeating the last one."""

    def __init__(self, *key_sets: list[dict], status_code: int = 200) -> None:
        self.key_sets = key_sets
        self.status_code = status_code
        self.calls = 0

    def __call__(self, request: httpx.Request) -> httpx.Response:
        assert str(request.url) == JWKS_URL
        keys = self.key_sets[min(self.calls, len(self.key_sets) - 1)] if self.key_sets else []
        self.calls += 1
        return httpx.Response(self.status_code, json={"keys": keys})

    def verifier(self) -> IdentityVerifier:
        return IdentityVerifier(client=httpx.AsyncClient(transport=httpx.MockTransport(self)))


@pytest.fixture(autouse=True)
def jwks_settings(monkeypatch):
    monkeypatch.setattr(settings, "auth_jwt_secret", None)
    monkeypatch.setattr(settings, "auth_jwks_url", JWKS_URL)
    monkeypatch.setattr(settings, "auth_issuer", ISSUER)
    monkeypatch.setattr(settings, "auth_audience", AUDIENCE)
    monkeypatch.setattr(settings, "auth_algorithms", "RS256")


@pytest.fixture(scope="module")
def signing_key() -> tuple[bytes, dict]:
    return rsa_key("key-1")


async def test_verifies_rs256_token_and_caches_jwks(signing_key):
    private_pem, public_jwk = signing_key
    server = JWKSServer([public_jwk])
    verifier = server.verifier()

    claims = await verifier.verify(sign(private_pem, "key-1"))
    assert claims.sub == "auth0|user-1"
    assert claims.email == "thandi@example.com"

    await verifier.verify(sign(private_pem, "key-1"))
    assert server.calls == 1
    await verifier.close()


async def test_refetches_jwks_on_unknown_kid(signing_key):
    old_pem, old_jwk = signing_key
    new_pem, new_jwk = rsa_key("key-2")
    server = JWKSServer([old_jwk], [old_jwk, new_jwk])
    verifier = server.verifier()

    await verifier.verify(sign(old_pem, "key-1"))
    claims = await verifier.verify(sign(new_pem, "key-2"))
    assert claims.sub == "auth0|user-1"
    assert server.calls == 2
    await verifier.close()


async def test_unknown_signing_key(signing_key):
    _, public_jwk = signing_key
    stranger_pem, _ = rsa_key("key-9")
    server = JWKSServer([public_jwk])
    verifier = server.verifier()

    with pytest.raises(AuthenticationError):
        await verifier.verify(sign(stranger_pem, "key-9"))
    assert server.calls == 2
    await verifier.close()


@pytest.mark.parametrize("claim,value", [("aud", "someone-else"), ("iss", "https://evil.test/")])
async def test_wrong_audience_or_issuer(signing_key, claim, value):
    private_pem, public_jwk = signing_key
    verifier = JWKSServer([public_jwk]).verifier()
    with pytest.raises(AuthenticationError):
        await verifier.verify(sign(private_pem, "key-1", **{claim: value}))
    await verifier.close()


async def test_key_mismatch_is_rejected(signing_key):
    _, public_jwk = signing_key
    forger_pem, _ = rsa_key("key-1")
    verifier = JWKSServer([public_jwk]).verifier()
    with pytest.raises(AuthenticationError):
        await verifier.verify(sign(forger_pem, "key-1"))
    await verifier.close()


async def test_identity_provider_outage_is_503(client, signing_key):
    private_pem, _ = signing_key
    verifier = JWKSServer(status_code=500).verifier()
    app.dependency_overrides[get_identity_verifier] = lambda: verifier

    resp = await client.get("/auth/me", headers={"Authorization": f"Bearer {sign(private_pem, 'key-1')}"})
    assert resp.status_code == 503
    assert resp.json()["detail"] == "Identity provider unavailable"
    await verifier.close()


async def test_rs256_user_is_provisioned(client, signing_key):
    private_pem, public_jwk = signing_key
    verifier = JWKSServer([public_jwk]).verifier()
    app.dependency_overrides[get_identity_verifier] = lambda: verifier

    resp = await client.get("/auth/me", headers={"Authorization": f"Bearer {sign(private_pem, 'key-1')}"})
    assert resp.status_code == 200
    assert resp.json()["id"] == "auth0|user-1"
    await verifier.close()
