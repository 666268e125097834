import base64
import logging
import time
from collections.abc import AsyncIterator
from typing import Any

import aiohttp
import jwt
from cachetools import TTLCache
from pydantic import ValidationError

from pr_describer.core.config import config
from pr_describer.core.errors import ConfigurationError, GitHubApiError
from pr_describer.core.models import ChangedFile

logger = logging.getLogger(__name__)


class GitHubClient:
    """
    A client for interacting with the GitHub API.

    This client handles the authentication flow for a GitHub App, including
    generating a JWT and exchanging it for an installation access token.
    Tokens are cached to improve performance and avoid rate limiting.
    App credentials are read lazily, so a missing key only fails the calls
    that need it.
    """

    def __init__(self, api_base_url: str | None = None):
        self._api_base_url = api_base_url or config.github.api_base_url
        self._private_key: str | None = None
        self._session: aiohttp.ClientSession | None = None
        # Cache for installation tokens (TTL: 50 minutes, GitHub tokens expire in 60)
        self._token_cache: TTLCache = TTLCache(maxsize=100, ttl=50 * 60)

    async def get_installation_access_token(self, installation_id: int) -> str | None:
        """
        Gets an access token for a specific installation of the GitHub App.
        Uses cached tokens when available.
        """
        if installation_id in self._token_cache:
            logger.debug(f"Using cached installation token for installation_id {installation_id}.")
            return self._token_cache[installation_id]

        jwt_token = self._generate_jwt()
        headers = {
            "Authorization": f"Bearer {jwt_token}",
            "Accept": "application/vnd.github.v3+json",
        }
        url = f"{self._api_base_url}/app/installations/{installation_id}/access_tokens"

        session = await self._get_session()
        async with session.post(url, headers=headers) as response:
            if response.status == 201:
                data = await response.json()
                token = data["token"]
                self._token_cache[installation_id] = token
                logger.info(f"Generated new installation token for installation_id {installation_id}.")
                return token
            else:
                error_text = await response.text()
                logger.error(
                    f"Failed to get installation access token for installation {installation_id}. "
                    f"Status: {response.status}, Response: {error_text}"
                )
                return None

    async def iter_pull_request_files(
        self, owner: str, repo: str, pr_number: int, installation_id: int, per_page: int = 100
    ) -> AsyncIterator[list[ChangedFile]]:
        """
        Yield the files changed in a pull request, one API page at a time.

        Pages are fetched lazily by following the Link: rel="next" header, so a
        consumer that stops iterating stops the requests too.

        Raises:
            GitHubApiError: If no token can be obtained or a page request fails.
        """
        headers = await self._get_auth_headers(installation_id)
        url: str | None = (
            f"{self._api_base_url}/repos/{owner}/{repo}/pulls/{pr_number}/files?per_page={min(per_page, 100)}"
        )
        page = 0

        session = await self._get_session()
        while url:
            async with session.get(url, headers=headers) as response:
                if response.status != 200:
                    error_text = await response.text()
                    logger.error(
                        f"Failed to get files for PR #{pr_number} in {owner}/{repo}. "
                        f"Status: {response.status}, Response: {error_text}"
                    )
                    raise GitHubApiError(
                        f"Failed to list files for PR #{pr_number} in {owner}/{repo}",
                        status=response.status,
                        body=error_text,
                    )
                data = await response.json()
                next_link = response.links.get("next")
                url = str(next_link["url"]) if next_link else None

            page += 1
            logger.info(f"Retrieved page {page} ({len(data)} files) for PR #{pr_number} in {owner}/{repo}")
            yield self._parse_files(data)

    async def update_pull_request_body(
        self, owner: str, repo: str, pr_number: int, body: str, installation_id: int
    ) -> bool:
        """Overwrite the description of a pull request. Returns True on success."""
        try:
            headers = await self._get_auth_headers(installation_id)
            headers["X-GitHub-Api-Version"] = config.github.api_version
            url = f"{self._api_base_url}/repos/{owner}/{repo}/pulls/{pr_number}"

            session = await self._get_session()
            async with session.patch(url, headers=headers, json={"body": body}) as response:
                if response.status == 200:
                    logger.info(f"Updated description of PR #{pr_number} in {owner}/{repo}")
                    return True
                error_text = await response.text()
                logger.error(
                    f"Failed to update PR #{pr_number} in {owner}/{repo}. "
                    f"Status: {response.status}, Response: {error_text}"
                )
                return False
        except Exception as e:
            logger.error(f"Error updating PR #{pr_number} in {owner}/{repo}: {e}")
            return False

    async def close(self):
        """Closes the aiohttp session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def _get_auth_headers(self, installation_id: int) -> dict[str, str]:
        token = await self.get_installation_access_token(installation_id)
        if not token:
            raise GitHubApiError(f"Failed to get installation token for {installation_id}")
        return {"Authorization": f"Bearer {token}", "Accept": "application/vnd.github.v3+json"}

    @staticmethod
    def _parse_files(data: list[dict[str, Any]]) -> list[ChangedFile]:
        files = []
        for item in data:
            try:
                files.append(ChangedFile.model_validate(item))
            except ValidationError as e:
                logger.warning(f"Skipping malformed file record {item.get('filename')!r}: {e}")
        return files

    async def _get_session(self) -> aiohttp.ClientSession:
        """Initializes and returns the aiohttp session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
        return self._session

    def _generate_jwt(self) -> str:
        """Generates a JSON Web Token (JWT) to authenticate as the GitHub App."""
        if not config.github.app_id:
            raise ConfigurationError("APP_ID_GITHUB is not set")
        if self._private_key is None:
            self._private_key = self._decode_private_key()
        payload = {
            "iat": int(time.time()) - 60,  # allow for clock drift
            "exp": int(time.time()) + (9 * 60),
            "iss": config.github.app_id,
        }
        return jwt.encode(payload, self._private_key, algorithm="RS256")

    @staticmethod
    def _decode_private_key() -> str:
        """
        Decodes the base64-encoded private key from the configuration.

        Returns:
            The decoded private key as a string.
        """
        if not config.github.private_key:
            raise ConfigurationError("PRIVATE_KEY_BASE64_GITHUB is not set")
        try:
            return base64.b64decode(config.github.private_key).decode("utf-8")
        except Exception as e:
            logger.error(f"Failed to decode private key: {e}")
            raise ConfigurationError("Invalid private key format. Expected base64-encoded PEM key.") from e


# Global instance
github_client = GitHubClient()
