import requests
from urllib.parse import quote
from typing import Dict, List, Any
from coveralls_migrate.core.exceptions import RepositoryListError
from coveralls_migrate.core.models import RepositoryRecord
from coveralls_migrate.utils.config_manager import COVERALLS_API_BASE
from coveralls_migrate.utils.logger import get_logger

logger = get_logger(__name__)

JSON_HEADER = "application/json"


def _get_headers(token: str) -> Dict[str, str]:
    return {
        "Authorization": f"token {token}",
        "Accept": JSON_HEADER
    }


def coveralls_repos_url(org_name: str, api_base: str = COVERALLS_API_BASE) -> str:
    return f"{api_base.rstrip('/')}/repos/github/{quote(org_name, safe='')}"


def get_org_repositories(token: str, org_name: str, api_base: str = COVERALLS_API_BASE) -> requests.Response:
    """GET the organization's repository list. The caller decides what a non-200 means."""
    url = coveralls_repos_url(org_name, api_base)
    logger.debug(f"Fetching Coveralls repositories for {org_name}: {url}")
    return requests.get(url, headers=_get_headers(token))


def fetch_repositories(token: str, org_name: str, api_base: str = COVERALLS_API_BASE) -> List[RepositoryRecord]:
    try:
        response = get_org_repositories(token, org_name, api_base)
    except requests.RequestException as e:
        logger.error(f"Request failed while retrieving repositories from Coveralls: {e}")
        raise RepositoryListError(f"Error retrieving repositories from Coveralls: {e}") from e

    if response.status_code != 200:
        logger.error(f"Coveralls repository list returned {response.status_code}")
        raise RepositoryListError(
            f"Error retrieving repositories from Coveralls: {response.status_code}: {response.text}",
            status_code=response.status_code,
            body=response.text
        )

    try:
        repos_data: List[Dict[str, Any]] = response.json() or []
        if not isinstance(repos_data, list):
            raise TypeError(f"expected a list of repositories, got {type(repos_data).__name__}")
        records = [RepositoryRecord.from_api(repo) for repo in repos_data]
    except (ValueError, KeyError, TypeError, AttributeError) as e:
        logger.error(f"Unreadable Coveralls repository list: {e!r}")
        raise RepositoryListError(
            f"Error retrieving repositories from Coveralls: unexpected response: {response.text}",
            status_code=response.status_code,
            body=response.text
        ) from e

    logger.info(f"Coveralls reports {len(records)} repositories for {org_name}")
    return records


def plan_migration(records: List[RepositoryRecord]) -> List[RepositoryRecord]:
    """
    Keep the repositories that are not yet on the GitHub App: no
    ``github_install_id`` or ``github_app_disabled`` set. Source order is kept.
    """
    return [record for record in records if record.needs_migration]
