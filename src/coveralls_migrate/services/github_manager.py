import requests
from urllib.parse import quote
from typing import Optional, Dict, Tuple
from coveralls_migrate.core.exceptions import InstallationError, InvalidRepositoryName
from coveralls_migrate.core.models import Installation
from coveralls_migrate.utils.logger import get_logger

logger = get_logger(__name__)

GITHUB_API_BASE = "https://api.github.com"
GITHUB_JSON_HEADER = "application/vnd.github.v3+json"
GITHUB_INSTALLATIONS_PREVIEW_HEADER = (
    "application/vnd.github.v3+json, application/vnd.github.machine-man-preview+json"
)
COVERALLS_APP_SLUG = "coveralls-official"


def _get_headers(token: str, accept: str = GITHUB_JSON_HEADER) -> Dict[str, str]:
    return {
        "Authorization": f"token {token}",
        "Accept": accept
    }


def github_orgs_url() -> str:
    return f"{GITHUB_API_BASE}/user/orgs"


def github_installations_url() -> str:
    return f"{GITHUB_API_BASE}/user/installations"


def github_repo_url(owner: str, repo: str) -> str:
    return f"{GITHUB_API_BASE}/repos/{quote(owner, safe='')}/{quote(repo, safe='')}"


def github_install_url(installation_id: int, repository_id: int) -> str:
    return f"{GITHUB_API_BASE}/user/installations/{int(installation_id)}/repositories/{int(repository_id)}"


def get_user_orgs(token: str) -> requests.Response:
    return requests.get(github_orgs_url(), headers=_get_headers(token))


def find_coveralls_installation(token: str, org_name: str) -> Installation:
    """
    Locate the Coveralls Official app among the user's GitHub App
    installations and check that it is installed on ``org_name``.
    """
    try:
        response = requests.get(
            github_installations_url(),
            headers=_get_headers(token, GITHUB_INSTALLATIONS_PREVIEW_HEADER)
        )
    except requests.RequestException as e:
        logger.error(f"Request failed while fetching GitHub App installations: {e}")
        raise InstallationError(f"Error fetching GitHub App installations: {e}") from e

    if response.status_code != 200:
        raise InstallationError(
            f"Error fetching GitHub App installations: {response.status_code}: {response.text}",
            status_code=response.status_code,
            body=response.text
        )

    try:
        installations = response.json().get("installations") or []
        candidates = [i for i in installations if i.get("app_slug") == COVERALLS_APP_SLUG]
    except (ValueError, AttributeError, TypeError) as e:
        logger.error(f"Unreadable GitHub App installations response: {e}")
        raise InstallationError(
            f"Error fetching GitHub App installations: unexpected response: {response.text}",
            status_code=response.status_code,
            body=response.text
        ) from e

    logger.debug(f"Found {len(installations)} GitHub App installations")

    if not candidates:
        raise InstallationError(
            "Coveralls Official GitHub App not found. Please install it first via https://coveralls.io"
        )

    try:
        installation = Installation.from_api(candidates[0])
    except (KeyError, TypeError, AttributeError) as e:
        raise InstallationError(
            f"Error fetching GitHub App installations: malformed installation entry: {candidates[0]}",
            status_code=response.status_code,
            body=response.text
        ) from e

    if installation.account_login != org_name:
        raise InstallationError(
            f"Coveralls Official app installation found, but not for organization '{org_name}'. "
            f"Found: '{installation.account_login}'"
        )

    logger.info(f"Using Coveralls Official installation {installation.id} on {installation.account_login}")
    return installation


def parse_repo_name(repo_name: str) -> Tuple[str, str]:
    parts = repo_name.split("/")
    if len(parts) != 2 or not all(parts):
        raise InvalidRepositoryName(repo_name)
    return parts[0], parts[1]


def get_github_repo_id(token: str, owner: str, repo_name: str) -> Optional[int]:
    """Return the numeric GitHub id of ``owner/repo_name``, or None if it can't be fetched."""
    try:
        response = requests.get(github_repo_url(owner, repo_name), headers=_get_headers(token))
    except requests.RequestException as e:
        logger.warning(f"Request failed for GitHub repository '{owner}/{repo_name}': {e}")
        return None

    if response.status_code != 200:
        logger.warning(f"GitHub repository '{owner}/{repo_name}' returned {response.status_code}")
        return None

    try:
        body = response.json()
    except ValueError as e:
        logger.warning(f"Unreadable response for GitHub repository '{owner}/{repo_name}': {e}")
        return None

    if not isinstance(body, dict) or not isinstance(body.get("id"), int):
        logger.warning(f"No repository id in response for '{owner}/{repo_name}'")
        return None
    return body["id"]


def add_repo_to_installation(token: str, installation_id: int, repository_id: int) -> int:
    """PUT the repository into the installation; returns the HTTP status (204 on success)."""
    url = github_install_url(installation_id, repository_id)
    logger.debug(f"Adding repository {repository_id} to installation {installation_id}")
    response = requests.put(url, headers=_get_headers(token, GITHUB_INSTALLATIONS_PREVIEW_HEADER))
    return response.status_code
