"""Release source backed by a Forge-style HTTP registry.

Speaks the Puppet Forge v3 releases API::

    GET {base_url}/v3/releases?module=owner-name&limit=100

Each page carries ``results`` (one entry per release, with
``metadata.dependencies`` as ``{"name", "version_requirement"}`` pairs) and
``pagination.next`` (a relative URL, or null on the last page).

Module names are normalised to ``owner-name``, which is the spelling release
names carry; request modules in that spelling so the root slots match.

Usage::

    with ForgeSource() as forge:
        resolver = Resolver([forge])
        releases = resolver.resolve(resolver.query({"puppetlabs-stdlib": ">=9"}))
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from depsolver.core.dependency import ModuleRelease, Source
from depsolver.exceptions import SourceError, ValidationFailure
from depsolver.sources.http_client import DEFAULT_TIMEOUT, build_client, fetch_json

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

DEFAULT_FORGE_URL: str = "https://forgeapi.puppet.com"
RELEASES_PATH: str = "/v3/releases"
PAGE_SIZE: int = 100


def normalize_name(name: str) -> str:
    """Return the ``owner-name`` spelling of a Forge module name."""
    return name.replace("/", "-")


class ForgeSource(Source):
    """A source querying a Forge-compatible HTTP registry.

    Responses are memoized per module name for the lifetime of the source,
    so a resolver sees a stable answer within (and across) queries.

    Args:
        base_url: Registry root URL.
        timeout: Request timeout in seconds.
        client: Optional pre-configured ``httpx.Client``; when given, the
            source does not close it.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_FORGE_URL,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        client: httpx.Client | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._owns_client = client is None
        self._client = client if client is not None else build_client(timeout=timeout)
        self._cache: dict[str, list[ModuleRelease]] = {}

    def fetch(self, name: str) -> list[ModuleRelease]:
        """Fetch every release of *name* from the registry.

        Releases whose metadata cannot be parsed are skipped with a warning.

        Raises:
            SourceError: On HTTP failures or malformed responses.
        """
        name = normalize_name(name)
        if name not in self._cache:
            self._cache[name] = self._fetch_all(name)
        return list(self._cache[name])

    def _fetch_all(self, name: str) -> list[ModuleRelease]:
        releases: list[ModuleRelease] = []
        url = f"{self.base_url}{RELEASES_PATH}"
        params: dict[str, Any] | None = {"module": name, "limit": PAGE_SIZE}

        while url:
            page = fetch_json(self._client, url, params=params)
            if not isinstance(page, dict):
                raise SourceError(f"Unexpected response for {name} from {url}")

            for entry in page.get("results") or []:
                release = self._entry_to_release(name, entry)
                if release is not None:
                    releases.append(release)

            pagination = page.get("pagination")
            next_path = pagination.get("next") if isinstance(pagination, dict) else None
            url = str(httpx.URL(self.base_url).join(next_path)) if next_path else ""
            params = None

        logger.debug("Forge returned %d release(s) of %s", len(releases), name)
        return releases

    def _entry_to_release(self, name: str, entry: Any) -> ModuleRelease | None:
        if not isinstance(entry, dict):
            logger.warning("Skipping malformed %s release entry", name)
            return None
        metadata = entry.get("metadata") or {}
        if not isinstance(metadata, dict):
            metadata = {}
        version = entry.get("version") or metadata.get("version")
        if not isinstance(version, str):
            logger.warning("Skipping %s release without a version", name)
            return None

        declared = metadata.get("dependencies") or []
        if not isinstance(declared, list) or not all(
            isinstance(dep, dict) for dep in declared
        ):
            logger.warning("Skipping %s@%s: malformed dependency list", name, version)
            return None

        dependencies: dict[str, str] = {}
        for dep in declared:
            dep_name = dep.get("name")
            if not isinstance(dep_name, str) or not dep_name:
                continue
            requirement = dep.get("version_requirement") or "*"
            if not isinstance(requirement, str):
                logger.warning(
                    "Skipping %s@%s: malformed requirement for %s", name, version, dep_name
                )
                return None
            dependencies[normalize_name(dep_name)] = requirement

        try:
            return self.create_release(name, version, dependencies)
        except ValidationFailure as exc:
            logger.warning("Skipping %s@%s: %s", name, version, exc)
            return None

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> ForgeSource:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"<ForgeSource {self.base_url}>"
