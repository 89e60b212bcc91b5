"""Async client for upstream license templates.

License texts come from the ``licenses/license-templates`` repository on
GitHub. The fetcher never raises for network problems: it returns a
``LicenseText`` with ``success=False`` so the caller can log a warning and
carry on without a LICENSE file.
"""

from __future__ import annotations

import httpx
from pydantic import BaseModel, Field

from pycrator.config import LicenseType

LICENSE_TEMPLATE_BASE_URL = (
    "https://raw.githubusercontent.com/licenses/license-templates/master/templates"
)

LICENSE_TEMPLATE_FILES: dict[LicenseType, str] = {
    LicenseType.MIT: "mit.txt",
    LicenseType.APACHE_2_0: "apache-2.0.txt",
    LicenseType.GPL_3_0: "gpl-3.0.txt",
    LicenseType.BSD_3_CLAUSE: "bsd-3-clause.txt",
}


class LicenseText(BaseModel):
    """Structured result of a license template download."""

    license_type: LicenseType
    url: str
    text: str = Field(default="", description="Raw template with [year]/[fullname] tokens")
    success: bool = Field(default=True)
    error: str | None = Field(default=None)


def license_url(license_type: LicenseType, base_url: str = LICENSE_TEMPLATE_BASE_URL) -> str:
    """Return the raw template URL for *license_type*."""
    return f"{base_url.rstrip('/')}/{LICENSE_TEMPLATE_FILES[license_type]}"


class LicenseFetcher:
    """Downloads license templates over HTTPS.

    Args:
        base_url: Root of the template collection.
        timeout: Per-request timeout in seconds.
        transport: Optional httpx transport, used by tests to serve canned
            responses.
    """

    def __init__(
        self,
        base_url: str = LICENSE_TEMPLATE_BASE_URL,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url
        self.timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout, connect=10.0),
            follow_redirects=True,
            transport=self._transport,
        )

    async def fetch(self, license_type: LicenseType) -> LicenseText:
        """Download the template for *license_type*."""
        url = license_url(license_type, self.base_url)
        try:
            async with self._client() as client:
                response = await client.get(url)
                response.raise_for_status()
                return LicenseText(license_type=license_type, url=url, text=response.text)
        except httpx.HTTPStatusError as exc:
            return LicenseText(
                license_type=license_type,
                url=url,
                success=False,
                error=f"HTTP {exc.response.status_code} from {url}",
            )
        except httpx.HTTPError as exc:
            return LicenseText(
                license_type=license_type,
                url=url,
                success=False,
                error=f"Cannot download {url}: {exc}",
            )
