"""HTTP client for the Strava sync relay."""

from dataclasses import dataclass

import httpx
import structlog

from ...config import Settings, get_settings
from ...errors import StravaSyncApiError, StravaSyncNotConfiguredError
from ...models.sync import StravaSyncPayload

logger = structlog.get_logger(__name__)


@dataclass
class RegisterInstallResponse:
    """Result of registering this install with the relay."""

    connect_url: str
    sync_token: str


class StravaSyncClient:
    """Talks JSON to the sync relay, which holds the actual Strava OAuth tokens.

    Every request is bounded by the configured timeout. Non-2xx answers and
    bodies that are not a JSON object raise ``StravaSyncApiError``;
    transport failures surface as ``httpx.HTTPError``.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        settings: Settings | None = None,
    ):
        settings = settings or get_settings()
        if base_url is None:
            self.base_url = settings.strava_base_url
        else:
            self.base_url = base_url.rstrip("/") or None
        self.timeout = timeout if timeout is not None else settings.strava_timeout_seconds
        self._transport = transport

    @property
    def is_configured(self) -> bool:
        return bool(self.base_url)

    async def _request_json(
        self,
        method: str,
        path: str,
        *,
        token: str | None = None,
        json_body: dict | None = None,
        params: dict | None = None,
    ) -> dict:
        if not self.base_url:
            raise StravaSyncNotConfiguredError()

        headers = {"Content-Type": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"

        async with httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=self._transport,
        ) as client:
            response = await client.request(
                method, path, headers=headers, json=json_body, params=params
            )

        if not response.is_success:
            logger.debug(
                "strava_relay_error",
                path=path,
                status=response.status_code,
            )
            raise StravaSyncApiError(
                response.text or "Strava sync API request failed",
                response.status_code,
            )

        if not response.content:
            return {}
        try:
            data = response.json()
        except ValueError:
            logger.debug("strava_relay_bad_body", path=path, status=response.status_code)
            raise StravaSyncApiError(
                "Strava sync API returned an invalid response",
                response.status_code,
            ) from None
        if not isinstance(data, dict):
            raise StravaSyncApiError(
                "Strava sync API returned an invalid response",
                response.status_code,
            )
        return data

    async def register_install(
        self, install_id: str, return_to: str | None = None
    ) -> RegisterInstallResponse:
        """Register an install id and get the OAuth connect URL."""
        data = await self._request_json(
            "POST",
            "/strava/register-install",
            json_body={"install_id": install_id, "return_to": return_to},
        )
        return RegisterInstallResponse(
            connect_url=data["connect_url"],
            sync_token=data["sync_token"],
        )

    async def get_connection_status(self, install_id: str, sync_token: str) -> bool:
        """Whether the relay has a Strava account linked to this install."""
        data = await self._request_json(
            "GET",
            "/strava/status",
            token=sync_token,
            params={"install_id": install_id},
        )
        return bool(data.get("connected"))

    async def post_session_sync(self, sync_token: str, payload: StravaSyncPayload) -> None:
        """Ask the relay to create the Strava activity."""
        await self._request_json(
            "POST",
            "/strava/sync-session",
            token=sync_token,
            json_body=payload.to_dict(),
        )

    async def disconnect_install(self, install_id: str, sync_token: str) -> None:
        """Unlink the Strava account from this install."""
        await self._request_json(
            "POST",
            "/strava/disconnect",
            token=sync_token,
            json_body={"install_id": install_id},
        )
