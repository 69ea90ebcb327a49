"""Update availability check against the PyPI JSON API."""

from __future__ import annotations

import logging
import sys
from importlib.metadata import PackageNotFoundError, version

from pydantic import BaseModel, ConfigDict

from addon_releaser.core.api.http import AsyncApiClient
from addon_releaser.core.release.constants import DIST_NAME, FORMAT_VERSION

logger = logging.getLogger(__name__)

PYPI_JSON_URL = "https://pypi.org/pypi/{name}/json"


class _ProjectInfo(BaseModel):
    model_config = ConfigDict(extra="ignore")

    version: str


class PyPIProject(BaseModel):
    """The subset of a PyPI project document used for update checks."""

    model_config = ConfigDict(extra="ignore")

    info: _ProjectInfo


def installed_version() -> str:
    """Version of the installed distribution, or the format version when not installed."""
    try:
        return version(DIST_NAME)
    except PackageNotFoundError:
        return FORMAT_VERSION


async def fetch_latest_version(client: AsyncApiClient, name: str = DIST_NAME) -> str:
    """Latest version of ``name`` published on PyPI.

    Raises:
        ApiError: On network, HTTP or decoding failure
    """
    response = await client.get(PYPI_JSON_URL.format(name=name))
    project: PyPIProject = client.parse_pydantic(response, PyPIProject)
    return project.info.version


async def check_for_update(client: AsyncApiClient, current: str | None = None) -> str | None:
    """Return the latest published version when it differs from ``current``.

    Best effort: any failure is logged at DEBUG and reported as no update.
    """
    try:
        current = current or installed_version()
        latest = await fetch_latest_version(client)
    except Exception as e:
        logger.debug("Update check failed: %s", e)
        return None
    if latest == current:
        return None
    return latest


def upgrade_command() -> list[str]:
    """pip invocation that upgrades the installed distribution."""
    return [sys.executable, "-m", "pip", "install", "--upgrade", DIST_NAME]
