"""Tests for wallet authentication and token refresh."""

import asyncio
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import pytest

from xrplsale import (
    AuthenticationError,
    AuthManager,
    AuthState,
    AuthToken,
    ServerError,
    TokenExpiredError,
)

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


class ManualClock:
    def __init__(self, now: datetime = NOW) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


class FakeAuthAPI:
    """Stands in for the auth endpoints; issues tok_1, tok_2, ..."""

    def __init__(self, expires_in: int = 3600, wallet_error: Optional[Exception] = None) -> None:
        self.expires_in = expires_in
        self.wallet_error = wallet_error
        self.gate: Optional[asyncio.Event] = None
        self.calls: list[tuple[str, str, Optional[dict[str, Any]]]] = []
        self.issued = 0

    async def __call__(self, method: str, path: str, *, json: Optional[Any] = None) -> Any:
        self.calls.append((method, path, json))
        # let concurrent callers pile up behind the refresh
        await asyncio.sleep(0)
        if self.gate is not None:
            await self.gate.wait()
        if path == "/auth/challenge":
            return {"challenge": f"nonce-{len(self.calls)}", "timestamp": 1717243200}
        if path == "/auth/wallet":
            if self.wallet_error is not None:
                raise self.wallet_error
            self.issued += 1
            return {"token": f"tok_{self.issued}", "expires_in": self.expires_in}
        raise AssertionError(f"unexpected call {method} {path}")

    def paths(self) -> list[str]:
        return [path for _, path, _ in self.calls]


class CountingSigner:
    def __init__(self) -> None:
        self.challenges: list[str] = []

    def __call__(self, challenge: str) -> str:
        self.challenges.append(challenge)
        return f"signed:{challenge}"


def make_manager(
    api: Optional[FakeAuthAPI] = None, **kwargs: Any
) -> tuple[AuthManager, FakeAuthAPI, ManualClock]:
    api = api or FakeAuthAPI()
    clock = ManualClock()
    manager = AuthManager("xs_key", api, clock=clock, **kwargs)
    return manager, api, clock


class TestStateMachine:
    @pytest.mark.asyncio
    async def test_starts_unauthenticated_with_api_key(self) -> None:
        manager, api, _ = make_manager()

        assert manager.state == AuthState.UNAUTHENTICATED
        assert await manager.headers() == {"X-API-Key": "xs_key"}
        assert api.calls == []

    @pytest.mark.asyncio
    async def test_challenge_response_flow(self) -> None:
        manager, api, _ = make_manager()

        challenge = await manager.generate_challenge("rWallet123")
        assert manager.state == AuthState.CHALLENGE_ISSUED
        assert challenge.wallet_address == "rWallet123"
        assert challenge.timestamp == 1717243200

        token = await manager.authenticate("rWallet123", "sig", challenge.timestamp)

        assert manager.state == AuthState.AUTHENTICATED
        assert token.token == "tok_1"
        assert token.expires_at == NOW + timedelta(hours=1)
        assert await manager.headers() == {"Authorization": "Bearer tok_1"}
        assert api.calls[1] == (
            "POST",
            "/auth/wallet",
            {"wallet_address": "rWallet123", "signature": "sig", "timestamp": 1717243200},
        )

    @pytest.mark.asyncio
    async def test_authenticate_requires_challenge(self) -> None:
        manager, api, _ = make_manager()

        with pytest.raises(AuthenticationError, match="No challenge issued"):
            await manager.authenticate("rWallet123", "sig", 1)
        assert api.calls == []

    @pytest.mark.asyncio
    async def test_challenge_requires_wallet(self) -> None:
        manager, _, _ = make_manager()

        with pytest.raises(AuthenticationError):
            await manager.generate_challenge()

    @pytest.mark.asyncio
    async def test_token_expires(self) -> None:
        manager, _, clock = make_manager()
        manager.set_token(AuthToken("tok_x", NOW + timedelta(minutes=10)), "rWallet123")

        assert manager.state == AuthState.AUTHENTICATED
        clock.advance(600)
        assert manager.state == AuthState.EXPIRED

    def test_leeway_treats_nearly_expired_as_expired(self) -> None:
        manager, _, _ = make_manager(leeway=30)
        manager.set_token(AuthToken("tok_x", NOW + timedelta(seconds=10)))

        assert manager.state == AuthState.EXPIRED

    def test_token_without_expiry_never_expires(self) -> None:
        manager, _, clock = make_manager()
        manager.set_token(AuthToken("tok_x"))
        clock.advance(10**9)

        assert manager.state == AuthState.AUTHENTICATED

    @pytest.mark.asyncio
    async def test_logout(self) -> None:
        manager, _, _ = make_manager()
        manager.set_token(AuthToken("tok_x", NOW + timedelta(hours=1)))

        manager.logout()

        assert manager.state == AuthState.UNAUTHENTICATED
        assert await manager.headers() == {"X-API-Key": "xs_key"}


class TestRefresh:
    @pytest.mark.asyncio
    async def test_expired_without_signer_fails_fast(self) -> None:
        manager, api, _ = make_manager(wallet_address="rWallet123")
        manager.set_token(AuthToken("tok_old", NOW - timedelta(seconds=1)))

        with pytest.raises(TokenExpiredError):
            await manager.headers()
        assert api.calls == []

    @pytest.mark.asyncio
    async def test_expired_token_is_refreshed_with_signer(self) -> None:
        signer = CountingSigner()
        manager, api, _ = make_manager(signer=signer, wallet_address="rWallet123")
        manager.set_token(AuthToken("tok_old", NOW - timedelta(seconds=1)))

        headers = await manager.headers()

        assert headers == {"Authorization": "Bearer tok_1"}
        assert api.paths() == ["/auth/challenge", "/auth/wallet"]
        assert signer.challenges == ["nonce-1"]
        assert api.calls[1][2]["signature"] == "signed:nonce-1"
        assert manager.state == AuthState.AUTHENTICATED

    @pytest.mark.asyncio
    async def test_concurrent_callers_share_one_refresh(self) -> None:
        signer = CountingSigner()
        manager, api, _ = make_manager(signer=signer, wallet_address="rWallet123")
        manager.set_token(AuthToken("tok_old", NOW - timedelta(seconds=1)))

        results = await asyncio.gather(*(manager.headers() for _ in range(10)))

        assert all(h == {"Authorization": "Bearer tok_1"} for h in results)
        assert api.paths() == ["/auth/challenge", "/auth/wallet"]
        assert len(signer.challenges) == 1

    @pytest.mark.asyncio
    async def test_concurrent_callers_share_one_failed_refresh(self) -> None:
        signer = CountingSigner()
        api = FakeAuthAPI(wallet_error=ServerError("unavailable", 503))
        manager, api, _ = make_manager(api, signer=signer, wallet_address="rWallet123")
        manager.set_token(AuthToken("tok_old", NOW - timedelta(seconds=1)))

        results = await asyncio.gather(
            *(manager.headers() for _ in range(5)), return_exceptions=True
        )

        assert all(isinstance(r, ServerError) for r in results)
        assert api.paths() == ["/auth/challenge", "/auth/wallet"]
        assert len(signer.challenges) == 1

        # a later request starts a new round
        api.wallet_error = None
        assert await manager.headers() == {"Authorization": "Bearer tok_1"}
        assert api.paths().count("/auth/challenge") == 2

    @pytest.mark.asyncio
    async def test_manual_challenge_does_not_block_api_key_requests(self) -> None:
        api = FakeAuthAPI()
        api.gate = asyncio.Event()
        manager, _, _ = make_manager(api)

        pending = asyncio.create_task(manager.generate_challenge("rWallet123"))
        await asyncio.sleep(0)

        headers = await asyncio.wait_for(manager.headers(), timeout=1)

        assert headers == {"X-API-Key": "xs_key"}
        api.gate.set()
        challenge = await pending
        assert challenge.wallet_address == "rWallet123"

    @pytest.mark.asyncio
    async def test_async_signer(self) -> None:
        async def signer(challenge: str) -> str:
            await asyncio.sleep(0)
            return "async:" + challenge

        manager, api, _ = make_manager(signer=signer)

        token = await manager.login("rWallet123")

        assert token.token == "tok_1"
        assert api.calls[1][2]["signature"] == "async:nonce-1"
        assert manager.wallet_address == "rWallet123"

    @pytest.mark.asyncio
    async def test_forced_refresh_replaces_valid_token(self) -> None:
        manager, api, _ = make_manager(signer=CountingSigner(), wallet_address="rWallet123")
        await manager.login()

        token = await manager.refresh()

        assert token.token == "tok_2"
        assert api.paths().count("/auth/wallet") == 2

    @pytest.mark.asyncio
    async def test_refresh_without_signer(self) -> None:
        manager, _, _ = make_manager()

        with pytest.raises(AuthenticationError):
            await manager.refresh()

    @pytest.mark.asyncio
    async def test_login_without_signer(self) -> None:
        manager, _, _ = make_manager(wallet_address="rWallet123")

        with pytest.raises(AuthenticationError, match="No signer"):
            await manager.login()
