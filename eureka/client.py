"""
Eureka Registry Client
Register an instance, fetch the registry snapshot, look up one application
"""

import logging
from typing import List, Optional, Sequence
from urllib.parse import quote

import requests
from requests.exceptions import (
    ChunkedEncodingError, ContentDecodingError, RequestException
)

from .config import DEFAULT_TIMEOUT, EurekaConfig
from .errors import (
    AppNotFoundError, DecodeError, EurekaIOError, TransportError,
    UnexpectedStatusError
)
from .models import Applications, Instance, RegisterRequest

logger = logging.getLogger(__name__)

NO_CONTENT = 204

# Printable ASCII minus space, quote, hash, angle brackets, question mark,
# backtick and braces. Controls and non-ASCII bytes are always escaped.
_PATH_SAFE = "".join(chr(c) for c in range(0x21, 0x7f) if chr(c) not in '"#<>?`{}')


def encode_segment(segment: str) -> str:
    """Percent-encode one URL path segment"""
    return quote(segment, safe=_PATH_SAFE)


class EurekaClient:
    """
    Synchronous client for a Eureka-style registry.

    Every call performs exactly one HTTP exchange and either returns a value
    or raises an :class:`~eureka.errors.EurekaError` subclass. Nothing is
    retried or cached; callers that need to wait for registry propagation
    must poll on their own.
    """

    HEADERS = {'Accept': 'application/json'}

    def __init__(self, url: str, session: Optional[requests.Session] = None,
                 timeout=None):
        """
        Args:
            url: Base registry URL, e.g. ``http://host:8761/eureka/apps``
            session: HTTP session to issue requests on (a new one if omitted)
            timeout: ``(connect, read)`` seconds, 5 seconds each by default
        """
        self.url = url.rstrip('/')
        self.timeout = timeout or (DEFAULT_TIMEOUT, DEFAULT_TIMEOUT)
        self._session = session or requests.Session()

    @classmethod
    def from_config(cls, config: EurekaConfig,
                    session: Optional[requests.Session] = None) -> 'EurekaClient':
        """Construct a client from an :class:`EurekaConfig`"""
        return cls(config.url, session=session, timeout=config.timeout)

    def close(self):
        """Release pooled connections"""
        self._session.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()

    def format_url(self, segments: Sequence[str] = ()) -> str:
        """Base URL followed by the percent-encoded path segments"""
        if not segments:
            return self.url
        return f"{self.url}/" + "/".join(encode_segment(s) for s in segments)

    def _send(self, method: str, url: str, **kwargs) -> requests.Response:
        logger.debug(f"{method} {url}")
        try:
            response = self._session.request(
                method, url, headers=self.HEADERS, timeout=self.timeout, **kwargs
            )
        except (ChunkedEncodingError, ContentDecodingError) as e:
            logger.warning(f"{method} {url} failed reading body: {e}")
            raise EurekaIOError(e) from e
        except RequestException as e:
            logger.warning(f"{method} {url} failed: {e}")
            raise TransportError(e) from e

        logger.debug(f"{method} {url} -> {response.status_code}")
        return response

    def register(self, app_name: str, instance: Instance):
        """
        Register ``instance`` under ``app_name``.

        The registry answers 204 on success; any other status, including
        other 2xx codes, raises :class:`UnexpectedStatusError`.
        """
        url = self.format_url([app_name])
        response = self._send('POST', url, json=RegisterRequest(instance).to_dict())

        if response.status_code != NO_CONTENT:
            logger.warning(f"Registration of {app_name} rejected: {response.status_code}")
            raise UnexpectedStatusError(response.status_code, response)

        logger.debug(f"Registered {instance.host_name} under {app_name}")

    def get_all(self) -> Applications:
        """Fetch and decode the full registry snapshot"""
        response = self._send('GET', self.format_url())

        if not 200 <= response.status_code < 300:
            raise UnexpectedStatusError(response.status_code, response)

        try:
            payload = response.json()
        except ValueError as e:
            raise DecodeError(f"document: invalid JSON: {e}", cause=e) from e

        return Applications.from_dict(payload)

    def get(self, app_name: str) -> List[Instance]:
        """Instances of one application; the name must match exactly"""
        applications = self.get_all().applications
        if app_name not in applications:
            raise AppNotFoundError(app_name)
        return applications[app_name]
