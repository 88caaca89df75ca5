"""Read-only lookups against the package registry HTTP API."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence

import requests
from requests import RequestException, Response

from .errors import RegistryError, VersionNotFoundRemotely
from .versions import Version, sort_version_names

log = logging.getLogger(__name__)


@dataclass
class RegistryClient:
    """HTTP client for an npm-compatible registry."""

    base_url: str
    package: str
    timeout: float = 10.0
    session: requests.Session = field(default_factory=requests.Session, repr=False)

    def __post_init__(self) -> None:
        self.base_url = self.base_url.rstrip("/")
        self.session.headers.setdefault("Accept", "application/json")

    def _url(self) -> str:
        return f"{self.base_url}/{self.package.replace('/', '%2F')}"

    def _request(self, *, ok_statuses: Sequence[int] = tuple(range(200, 300))) -> Response:
        url = self._url()
        try:
            resp = self.session.get(url, timeout=self.timeout)
        except RequestException as exc:
            raise RegistryError(f"GET {url} failed: {exc}") from exc

        if resp.status_code == 404:
            raise VersionNotFoundRemotely(f"package {self.package} not found at {self.base_url}")
        if resp.status_code not in ok_statuses:
            raise RegistryError(f"GET {url} returned {resp.status_code}: {resp.text}")
        return resp

    def package_document(self) -> Mapping[str, Any]:
        resp = self._request()
        try:
            payload = resp.json()
        except ValueError as exc:
            raise RegistryError(f"invalid registry response for {self.package}") from exc
        if not isinstance(payload, Mapping):
            raise RegistryError(f"invalid registry response for {self.package}")
        log.debug("fetched registry document for %s", self.package)
        return payload

    def latest_version(self) -> Version:
        tags = self.package_document().get("dist-tags") or {}
        latest = tags.get("latest") if isinstance(tags, Mapping) else None
        version = Version.try_parse(str(latest or ""))
        if version is None:
            raise VersionNotFoundRemotely(f"no latest version published for {self.package}")
        return version

    def published_versions(self) -> list[Version]:
        versions = self.package_document().get("versions") or {}
        if not isinstance(versions, Mapping):
            raise RegistryError(f"invalid versions listing for {self.package}")
        return sort_version_names(versions.keys())
