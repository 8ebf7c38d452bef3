"""Wallet authentication and session token management."""

import asyncio
import inspect
import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Awaitable, Callable, Optional, Union

from .errors import AuthenticationError, ParseError, TokenExpiredError
from .types import AuthChallenge, AuthToken

logger = logging.getLogger(__name__)

# Signs challenge text with the wallet key; may be a plain function or a coroutine function
Signer = Callable[[str], Union[str, Awaitable[str]]]
Send = Callable[..., Awaitable[Any]]
Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuthState(str, Enum):
    """Authentication lifecycle."""

    UNAUTHENTICATED = "unauthenticated"
    CHALLENGE_ISSUED = "challenge_issued"
    AUTHENTICATED = "authenticated"
    EXPIRED = "expired"


class AuthManager:
    """
    Owns the session token shared by all services of a client.

    Requests are authenticated with the bearer token once a wallet has signed
    in, and with the API key otherwise. An expired token is refreshed through
    `signer` when one is configured; concurrent requests wait for a single
    refresh and share its token or its error. Without a signer they fail with
    `TokenExpiredError`.
    """

    def __init__(
        self,
        api_key: str,
        send: Send,
        *,
        signer: Optional[Signer] = None,
        wallet_address: Optional[str] = None,
        leeway: float = 30.0,
        clock: Optional[Clock] = None,
    ) -> None:
        """
        Args:
            api_key: API key used while no wallet session exists
            send: Coroutine issuing unauthenticated API requests
            signer: Signs challenge text for automatic re-authentication
            wallet_address: Wallet used for automatic re-authentication
            leeway: Seconds before expiry at which a token counts as expired
            clock: Returns the current UTC time
        """
        self._api_key = api_key
        self._send = send
        self._signer = signer
        self._wallet_address = wallet_address
        self._leeway = leeway
        self._clock = clock or _utcnow
        self._token: Optional[AuthToken] = None
        self._challenge: Optional[AuthChallenge] = None
        self._lock = asyncio.Lock()
        self._refresh: Optional["asyncio.Task[AuthToken]"] = None

    @property
    def state(self) -> AuthState:
        if self._challenge is not None:
            return AuthState.CHALLENGE_ISSUED
        if self._token is None:
            return AuthState.UNAUTHENTICATED
        if self._is_expired(self._token):
            return AuthState.EXPIRED
        return AuthState.AUTHENTICATED

    @property
    def token(self) -> Optional[AuthToken]:
        return self._token

    @property
    def wallet_address(self) -> Optional[str]:
        return self._wallet_address

    def _is_expired(self, token: AuthToken) -> bool:
        return token.is_expired(self._clock(), self._leeway)

    def set_token(self, token: Optional[AuthToken], wallet_address: Optional[str] = None) -> None:
        """Install a token obtained elsewhere (or clear it with None)."""
        self._token = token
        self._challenge = None
        if wallet_address is not None:
            self._wallet_address = wallet_address

    def logout(self) -> None:
        """Drop the session; later requests use the API key."""
        self._token = None
        self._challenge = None

    async def generate_challenge(self, wallet_address: Optional[str] = None) -> AuthChallenge:
        """
        Request a challenge for a wallet to sign.

        Args:
            wallet_address: XRPL account address (defaults to the configured one)

        Returns:
            The challenge to sign
        """
        async with self._lock:
            return await self._generate_challenge(wallet_address)

    async def authenticate(
        self, wallet_address: str, signature: str, timestamp: int
    ) -> AuthToken:
        """
        Exchange a signed challenge for a session token.

        Args:
            wallet_address: The wallet that signed the challenge
            signature: Signature over the challenge text
            timestamp: Timestamp of the challenge

        Raises:
            AuthenticationError: If no challenge was issued first
        """
        async with self._lock:
            return await self._authenticate(wallet_address, signature, timestamp)

    async def login(self, wallet_address: Optional[str] = None) -> AuthToken:
        """Run a full challenge-response round with the configured signer."""
        return await self._locked_login(wallet_address)

    async def refresh(self) -> AuthToken:
        """Re-authenticate unless another caller already did."""
        return await self._ensure_fresh(self._token, force=True)

    async def headers(self) -> dict[str, str]:
        """Resolve the auth headers for one request."""
        token = self._token
        if token is not None and not self._is_expired(token):
            return {"Authorization": f"Bearer {token.token}"}
        if token is None and self._refresh is None:
            return {"X-API-Key": self._api_key}

        fresh = await self._ensure_fresh(token)
        if fresh is None:
            return {"X-API-Key": self._api_key}
        return {"Authorization": f"Bearer {fresh.token}"}

    async def _ensure_fresh(
        self, stale: Optional[AuthToken], force: bool = False
    ) -> Optional[AuthToken]:
        # Waiters share the outcome of the in-flight refresh, failures included
        if self._refresh is not None:
            return await asyncio.shield(self._refresh)

        current = self._token
        if current is not None and current is not stale and not self._is_expired(current):
            return current
        if current is None and not force:
            return None
        if self._signer is None or self._wallet_address is None:
            if force:
                raise AuthenticationError("A signer and wallet address are required to refresh")
            raise TokenExpiredError()

        logger.info("Session token expired, re-authenticating %s", self._wallet_address)
        self._refresh = asyncio.ensure_future(self._locked_login(self._wallet_address))
        self._refresh.add_done_callback(self._refresh_done)
        return await asyncio.shield(self._refresh)

    def _refresh_done(self, task: "asyncio.Task[AuthToken]") -> None:
        if self._refresh is task:
            self._refresh = None

    async def _locked_login(self, wallet_address: Optional[str]) -> AuthToken:
        async with self._lock:
            return await self._login(wallet_address)

    async def _login(self, wallet_address: Optional[str]) -> AuthToken:
        if self._signer is None:
            raise AuthenticationError("No signer configured")
        challenge = await self._generate_challenge(wallet_address)
        signature = self._signer(challenge.challenge)
        if inspect.isawaitable(signature):
            signature = await signature
        return await self._authenticate(
            challenge.wallet_address, signature, challenge.timestamp
        )

    async def _generate_challenge(self, wallet_address: Optional[str]) -> AuthChallenge:
        address = wallet_address or self._wallet_address
        if not address:
            raise AuthenticationError("A wallet address is required")
        data = await self._send("POST", "/auth/challenge", json={"wallet_address": address})
        try:
            challenge = AuthChallenge.from_dict(data, address)
        except (KeyError, TypeError, ValueError) as err:
            raise ParseError(f"Unexpected challenge response: {err}") from err
        self._challenge = challenge
        self._wallet_address = address
        return challenge

    async def _authenticate(
        self, wallet_address: str, signature: str, timestamp: int
    ) -> AuthToken:
        if self._challenge is None:
            raise AuthenticationError("No challenge issued; call generate_challenge first")
        data = await self._send(
            "POST",
            "/auth/wallet",
            json={
                "wallet_address": wallet_address,
                "signature": signature,
                "timestamp": timestamp,
            },
        )
        try:
            token = AuthToken.from_dict(data, self._clock())
        except (KeyError, TypeError, ValueError) as err:
            raise ParseError(f"Unexpected authentication response: {err}") from err
        self._token = token
        self._challenge = None
        self._wallet_address = wallet_address
        logger.info("Authenticated wallet %s", wallet_address)
        return token
