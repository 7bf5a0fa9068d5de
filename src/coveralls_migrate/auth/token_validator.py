import requests
from coveralls_migrate.core.exceptions import CredentialError
from coveralls_migrate.services.coveralls_manager import get_org_repositories
from coveralls_migrate.services.github_manager import get_user_orgs
from coveralls_migrate.utils.config_manager import COVERALLS_API_BASE
from coveralls_migrate.utils.logger import get_logger

logger = get_logger(__name__)


def validate_coveralls_token(token: str, org_name: str, api_base: str = COVERALLS_API_BASE):
    try:
        response = get_org_repositories(token, org_name, api_base)
    except requests.RequestException as e:
        logger.error(f"Failed to validate Coveralls token: {e}")
        raise CredentialError(f"Error validating Coveralls token: {e}") from e

    if response.status_code != 200:
        raise CredentialError(
            f"Error validating Coveralls token: {response.status_code}: {response.text}",
            status_code=response.status_code,
            body=response.text
        )
    logger.info("Coveralls token validated")


def validate_github_token(token: str):
    try:
        response = get_user_orgs(token)
    except requests.RequestException as e:
        logger.error(f"Failed to authenticate to GitHub: {e}")
        raise CredentialError(f"Error authenticating to GitHub: {e}") from e

    if response.status_code != 200:
        raise CredentialError(
            f"Error authenticating to GitHub: {response.status_code}: {response.text}",
            status_code=response.status_code,
            body=response.text
        )
    logger.info("GitHub token validated")
