"""
Remote Template Client

Talks to a gitignore.io compatible API: ``<url>/list`` returns the available
identifiers and ``<url>/<name>`` returns one template.
"""

import re
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

import requests

from ignr import APP_NAME, __version__
from ignr.core.exceptions import NetworkError, ErrorCode
from ignr.core.templates.embedded import TEMPLATE_SUFFIX
from ignr.utils import api_retry, normalize_names


logger = logging.getLogger(__name__)


@dataclass
class SyncResult:
    """Outcome of a template sync."""

    total: int = 0
    synced: int = 0
    failed: int = 0
    failures: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            'total': self.total,
            'synced': self.synced,
            'failed': self.failed,
            'failures': self.failures,
        }


class TemplateClient:
    """
    HTTP client for the remote template source.

    Connection errors and timeouts are retried with exponential backoff;
    HTTP error statuses are not retried.
    """

    def __init__(
        self,
        base_url: str,
        timeout: int = 30,
        max_retries: int = 2,
        session: Optional[requests.Session] = None
    ):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.max_retries = max_retries
        self.session = session or requests.Session()
        self.session.headers.setdefault('User-Agent', f'{APP_NAME}/{__version__}')

    @api_retry()
    def _get(self, url: str) -> requests.Response:
        return self.session.get(url, timeout=self.timeout)

    def _request(self, url: str) -> requests.Response:
        try:
            return self._get(url, max_retries=self.max_retries)
        except requests.exceptions.Timeout as e:
            raise NetworkError(
                f"Timed out fetching {url}",
                error_code=ErrorCode.NETWORK_TIMEOUT,
                url=url,
                cause=e
            )
        except requests.RequestException as e:
            raise NetworkError(f"Failed to reach {url}: {e}", url=url, cause=e)

    def list_remote(self) -> List[str]:
        """
        Fetch the identifiers offered by the remote source.

        Raises:
            NetworkError: If the list cannot be fetched
        """
        list_url = f"{self.base_url}/list"
        logger.info("Fetching template list from %s", list_url)

        response = self._request(list_url)
        if not response.ok:
            raise NetworkError(
                f"Failed to fetch template list: HTTP {response.status_code}",
                error_code=ErrorCode.NETWORK_INVALID_RESPONSE,
                url=list_url,
                status_code=response.status_code
            )

        names = normalize_names(re.split(r'[,\r\n]+', response.text))
        return list(dict.fromkeys(names))

    def fetch(self, name: str) -> Optional[str]:
        """
        Fetch a single template.

        Returns:
            Template text, or None when the source answers with an error status

        Raises:
            NetworkError: If the source cannot be reached
        """
        url = f"{self.base_url}/{name.lower()}"
        logger.debug("Fetching template: %s", name)

        response = self._request(url)
        if not response.ok:
            logger.debug("HTTP %s for template: %s", response.status_code, name)
            return None
        return response.text

    def sync(self, target_dir: Path, names: Optional[List[str]] = None) -> SyncResult:
        """
        Download every remote template into ``target_dir``.

        A failure to fetch the list raises; individual template failures are
        counted and the sync continues.

        Args:
            target_dir: Directory the templates are written to
            names: Identifiers to download (fetched from the source when None)
        """
        if names is None:
            names = self.list_remote()
        else:
            names = normalize_names(names)
        target_dir = Path(target_dir)
        target_dir.mkdir(parents=True, exist_ok=True)

        result = SyncResult(total=len(names))
        for name in names:
            try:
                content = self.fetch(name)
            except NetworkError as e:
                logger.debug("Failed to fetch %s: %s", name, e)
                content = None

            if content is None:
                result.failed += 1
                result.failures.append(name)
                continue

            path = target_dir / f"{name}{TEMPLATE_SUFFIX}"
            try:
                path.write_text(content, encoding='utf-8')
            except OSError as e:
                logger.warning("Failed to write %s: %s", path, e)
                result.failed += 1
                result.failures.append(name)
                continue

            result.synced += 1
            logger.debug("Saved: %s", name)

        return result
