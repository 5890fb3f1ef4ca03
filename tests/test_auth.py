"""Tests for JWT bearer OAuth, token introspection and key loading."""

import base64
from urllib.parse import parse_qs

import jwt
import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec

from einsteinbot.auth import (
    Introspector,
    JwtBearerOAuth,
    StaticTokenAuth,
    compute_token_ttl,
    load_private_key,
)
from einsteinbot.errors import InactiveTokenError, OAuthResponseError, SigningError

from tests.conftest import LOGIN_ENDPOINT, FakeClock, RecordingCache

TOKEN_PATH = "/services/oauth2/token"
INTROSPECT_PATH = "/services/oauth2/introspect"


def _form(request):
    return {k: v[0] for k, v in parse_qs(request.content.decode()).items()}


def _oauth(server, key, clock, cache=None):
    return JwtBearerOAuth(
        key,
        login_endpoint=LOGIN_ENDPOINT,
        connected_app_id="app-id",
        connected_app_secret="app-secret",
        user_id="bot@example.com",
        cache=cache,
        http=server.client(),
        clock=clock,
    )


class TestComputeTokenTtl:
    def test_subtracts_safety_margin(self):
        assert compute_token_ttl(10_000 + 7200, 10_000) == 6900

    def test_floors_at_zero(self):
        assert compute_token_ttl(10_000 + 100, 10_000) == 0
        assert compute_token_ttl(9_000, 10_000) == 0


class TestJwtBearerOAuth:
    @pytest.mark.asyncio
    async def test_cache_hit_makes_no_network_call(self, server, rsa_key, clock):
        cache = RecordingCache()
        await cache.set("bots-oAuthToken-app-id", "cached-token")
        oauth = _oauth(server, rsa_key, clock, cache)

        assert await oauth.get_token() == "cached-token"
        assert server.requests == []

    @pytest.mark.asyncio
    async def test_fetch_introspect_and_cache(self, server, rsa_key, clock):
        server.add("POST", TOKEN_PATH, json={"access_token": "fresh-token"})
        server.add("POST", INTROSPECT_PATH, json={"active": True, "exp": int(clock.now) + 7200})
        cache = RecordingCache()
        oauth = _oauth(server, rsa_key, clock, cache)

        assert await oauth.get_token() == "fresh-token"
        assert cache.writes == [("bots-oAuthToken-app-id", "fresh-token", 6900)]

        token_form = _form(server.calls("POST", TOKEN_PATH)[0])
        assert token_form["grant_type"] == "urn:ietf:params:oauth:grant-type:jwt-bearer"
        claims = jwt.decode(
            token_form["assertion"],
            rsa_key.public_key(),
            algorithms=["RS256"],
            audience=LOGIN_ENDPOINT,
            options={"verify_exp": False},
        )
        assert claims["iss"] == "app-id"
        assert claims["sub"] == "bot@example.com"
        assert claims["exp"] == int(clock.now) + 900

    @pytest.mark.asyncio
    async def test_second_call_served_from_cache(self, server, rsa_key, clock):
        server.add("POST", TOKEN_PATH, json={"access_token": "fresh-token"})
        server.add("POST", INTROSPECT_PATH, json={"active": True, "exp": int(clock.now) + 7200})
        oauth = _oauth(server, rsa_key, clock, RecordingCache())

        await oauth.get_token()
        await oauth.get_token()
        assert len(server.calls("POST", TOKEN_PATH)) == 1

    @pytest.mark.asyncio
    async def test_short_lived_token_is_refetched(self, server, rsa_key, clock):
        server.add("POST", TOKEN_PATH, json={"access_token": "short-token"})
        server.add("POST", INTROSPECT_PATH, json={"active": True, "exp": int(clock.now) + 120})
        cache = RecordingCache()
        oauth = _oauth(server, rsa_key, clock, cache)

        await oauth.get_token()
        await oauth.get_token()
        assert cache.writes[0][2] == 0
        assert len(server.calls("POST", TOKEN_PATH)) == 2

    @pytest.mark.asyncio
    async def test_cached_token_expires_after_ttl(self, server, rsa_key, clock):
        server.add("POST", TOKEN_PATH, json={"access_token": "fresh-token"})
        server.add("POST", INTROSPECT_PATH, json={"active": True, "exp": int(clock.now) + 7200})
        cache_clock = FakeClock(0.0)
        cache = RecordingCache(clock=cache_clock)
        oauth = _oauth(server, rsa_key, clock, cache)

        await oauth.get_token()
        assert cache.writes[0][2] == 6900

        cache_clock.advance(6899)
        await oauth.get_token()
        assert len(server.calls("POST", TOKEN_PATH)) == 1

        cache_clock.advance(1)
        await oauth.get_token()
        assert len(server.calls("POST", TOKEN_PATH)) == 2

    @pytest.mark.asyncio
    async def test_without_cache_always_fetches(self, server, rsa_key, clock):
        server.add("POST", TOKEN_PATH, json={"access_token": "t"})
        server.add("POST", INTROSPECT_PATH, json={"active": True, "exp": int(clock.now) + 7200})
        oauth = _oauth(server, rsa_key, clock)

        await oauth.get_token()
        await oauth.get_token()
        assert len(server.calls("POST", TOKEN_PATH)) == 2

    @pytest.mark.asyncio
    async def test_inactive_token_is_rejected(self, server, rsa_key, clock):
        server.add("POST", TOKEN_PATH, json={"access_token": "dead-token"})
        server.add("POST", INTROSPECT_PATH, json={"active": False})
        cache = RecordingCache()
        oauth = _oauth(server, rsa_key, clock, cache)

        with pytest.raises(InactiveTokenError):
            await oauth.get_token()
        assert cache.writes == []

    @pytest.mark.asyncio
    async def test_token_endpoint_error(self, server, rsa_key, clock):
        server.add("POST", TOKEN_PATH, status=400, json={"error": "invalid_grant"})
        cache = RecordingCache()
        oauth = _oauth(server, rsa_key, clock, cache)

        with pytest.raises(OAuthResponseError) as exc_info:
            await oauth.get_token()
        assert exc_info.value.status_code == 400
        assert "invalid_grant" in exc_info.value.error_response
        assert server.calls("POST", INTROSPECT_PATH) == []
        assert cache.writes == []

    @pytest.mark.asyncio
    async def test_missing_access_token(self, server, rsa_key, clock):
        server.add("POST", TOKEN_PATH, json={"token_type": "Bearer"})
        oauth = _oauth(server, rsa_key, clock)

        with pytest.raises(OAuthResponseError):
            await oauth.get_token()

    @pytest.mark.asyncio
    async def test_signing_failure(self, server, clock):
        ec_key = ec.generate_private_key(ec.SECP256R1())
        oauth = _oauth(server, ec_key, clock)

        with pytest.raises(SigningError):
            await oauth.get_token()
        assert server.requests == []

    @pytest.mark.asyncio
    async def test_authorization_header_has_bearer_prefix(self, server, rsa_key, clock):
        cache = RecordingCache()
        await cache.set("bots-oAuthToken-app-id", "abc")
        oauth = _oauth(server, rsa_key, clock, cache)
        assert await oauth.get_authorization_header() == "Bearer abc"

    @pytest.mark.asyncio
    async def test_aclose_leaves_injected_http_client_open(self, server, rsa_key, clock):
        http = server.client()
        oauth = JwtBearerOAuth(
            rsa_key,
            login_endpoint=LOGIN_ENDPOINT,
            connected_app_id="app-id",
            connected_app_secret="app-secret",
            user_id="bot@example.com",
            http=http,
            clock=clock,
        )

        await oauth.aclose()

        assert not http.is_closed
        await http.aclose()

    @pytest.mark.asyncio
    async def test_aclose_closes_owned_http_client(self, rsa_key):
        oauth = JwtBearerOAuth(
            rsa_key,
            login_endpoint=LOGIN_ENDPOINT,
            connected_app_id="app-id",
            connected_app_secret="app-secret",
            user_id="bot@example.com",
        )

        await oauth.aclose()

        assert oauth._http.is_closed

    def test_missing_required_field(self, rsa_key):
        with pytest.raises(ValueError, match="user_id"):
            JwtBearerOAuth(
                rsa_key,
                login_endpoint=LOGIN_ENDPOINT,
                connected_app_id="app-id",
                connected_app_secret="secret",
                user_id="",
            )


class TestIntrospector:
    @pytest.mark.asyncio
    async def test_sends_basic_auth_and_form(self, server):
        server.add("POST", INTROSPECT_PATH, json={"active": True, "exp": 123, "scope": "api"})
        introspector = Introspector("app-id", "app-secret", LOGIN_ENDPOINT, http=server.client())

        result = await introspector.introspect("tok")

        assert result.active is True
        assert result.exp == 123
        request = server.requests[0]
        expected = base64.b64encode(b"app-id:app-secret").decode()
        assert request.headers["Authorization"] == f"Basic {expected}"
        assert _form(request) == {"token": "tok", "token_type": "access_token"}

    @pytest.mark.asyncio
    async def test_error_response(self, server):
        server.add("POST", INTROSPECT_PATH, status=401, json={"error": "invalid_client"})
        introspector = Introspector("app-id", "bad", LOGIN_ENDPOINT, http=server.client())

        with pytest.raises(OAuthResponseError) as exc_info:
            await introspector.introspect("tok")
        assert exc_info.value.status_code == 401

    @pytest.mark.asyncio
    async def test_aclose_leaves_injected_http_client_open(self, server):
        http = server.client()
        introspector = Introspector("app-id", "app-secret", LOGIN_ENDPOINT, http=http)

        await introspector.aclose()

        assert not http.is_closed
        await http.aclose()


class TestLoadPrivateKey:
    def test_pem(self, tmp_path, rsa_key):
        path = tmp_path / "key.pem"
        path.write_bytes(
            rsa_key.private_bytes(
                serialization.Encoding.PEM,
                serialization.PrivateFormat.PKCS8,
                serialization.NoEncryption(),
            )
        )
        loaded = load_private_key(path)
        assert loaded.public_key().public_numbers() == rsa_key.public_key().public_numbers()

    def test_der(self, tmp_path, rsa_key):
        path = tmp_path / "key.der"
        path.write_bytes(
            rsa_key.private_bytes(
                serialization.Encoding.DER,
                serialization.PrivateFormat.PKCS8,
                serialization.NoEncryption(),
            )
        )
        assert load_private_key(path).key_size == 2048

    def test_garbage(self, tmp_path):
        path = tmp_path / "key.pem"
        path.write_bytes(b"not a key")
        with pytest.raises(SigningError):
            load_private_key(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(SigningError):
            load_private_key(tmp_path / "absent.pem")

    def test_non_rsa_key(self, tmp_path):
        path = tmp_path / "ec.pem"
        path.write_bytes(
            ec.generate_private_key(ec.SECP256R1()).private_bytes(
                serialization.Encoding.PEM,
                serialization.PrivateFormat.PKCS8,
                serialization.NoEncryption(),
            )
        )
        with pytest.raises(SigningError, match="not an RSA key"):
            load_private_key(path)


class TestStaticTokenAuth:
    @pytest.mark.asyncio
    async def test_header(self):
        assert await StaticTokenAuth("xyz").get_authorization_header() == "Bearer xyz"
