"""HTTP client for the vendor registration endpoint."""

import logging
from typing import Mapping

import httpx

from vendor_bot.wizard.fields import Attachment
from vendor_bot.wizard.responses import RegistrationResponse, parse_response

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


class RegistrationClient:
    """
    Posts vendor applications as multipart/form-data.

    Status codes never raise: every response is handed to parse_response.
    Transport problems surface as httpx exceptions (TimeoutException,
    RequestError) for the caller to classify.
    """

    def __init__(
        self,
        base_url: str,
        path: str = "/api/vendor-onboarding/",
        timeout: float = DEFAULT_TIMEOUT,
        api_token: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.path = path
        self.timeout = timeout
        self.api_token = api_token
        self._transport = transport
        self._cookies = httpx.Cookies()

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.api_token:
            headers["Authorization"] = f"Bearer {self.api_token}"
        return headers

    async def submit_application(
        self,
        fields: Mapping[str, str],
        files: Mapping[str, Attachment],
    ) -> RegistrationResponse:
        multipart = {
            name: (doc.filename, doc.content, doc.content_type)
            for name, doc in files.items()
        }

        async with httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            headers=self._headers(),
            cookies=self._cookies,
            transport=self._transport,
        ) as client:
            resp = await client.post(self.path, data=dict(fields), files=multipart)
            self._cookies = client.cookies

        logger.info(
            "Registration endpoint answered: %s %s → %s",
            "POST", self.path, resp.status_code,
        )
        return parse_response(resp)
