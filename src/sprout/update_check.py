"""Check PyPI for a newer sprout release."""

import logging

import httpx
from packaging.version import InvalidVersion, Version

from sprout import __version__
from sprout.console import console

logger = logging.getLogger(__name__)

PYPI_URL = "https://pypi.org/pypi/sprout/json"
UPDATE_CHECK_TIMEOUT = 3.0
UPDATE_COMMAND = "pip install --upgrade sprout"


def fetch_latest_version(client: httpx.Client | None = None) -> str:
    """Return the latest version published on PyPI.

    Raises:
        httpx.HTTPError: On network failure or a non-2xx response.
        ValueError: If the payload has no version.
    """
    if client is None:
        with httpx.Client(timeout=UPDATE_CHECK_TIMEOUT) as owned:
            return fetch_latest_version(owned)

    response = client.get(PYPI_URL, timeout=UPDATE_CHECK_TIMEOUT)
    response.raise_for_status()
    data = response.json()
    info = data.get("info") if isinstance(data, dict) else None
    version = info.get("version") if isinstance(info, dict) else None
    if not isinstance(version, str):
        raise ValueError("PyPI response has no info.version")
    return version


def is_newer(latest: str, current: str = __version__) -> bool:
    """Compare two version strings; unparsable versions are never newer."""
    try:
        return Version(latest) > Version(current)
    except InvalidVersion:
        return False


def check_for_updates(client: httpx.Client | None = None) -> str | None:
    """Print a notice if a newer version is available.

    Never raises: network, parsing and timeout errors are swallowed so the
    check can never fail the CLI.

    Returns the newer version if one was announced, else None.
    """
    try:
        latest = fetch_latest_version(client)
    except (httpx.HTTPError, ValueError) as e:
        logger.debug("Update check failed: %s", e)
        return None

    if not is_newer(latest):
        return None

    console.print()
    console.print(
        f"[bold yellow]Update available![/bold yellow] {__version__} -> {latest}"
    )
    console.print(f"Run [cyan]{UPDATE_COMMAND}[/cyan] to update")
    return latest
