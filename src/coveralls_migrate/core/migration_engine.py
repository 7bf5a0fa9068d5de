import requests
from typing import List, Optional, TextIO
from coveralls_migrate.auth.token_validator import validate_coveralls_token, validate_github_token
from coveralls_migrate.core.exceptions import InvalidRepositoryName
from coveralls_migrate.core.models import Credentials, Installation, MigrationResult, MigrationTarget, RepositoryRecord
from coveralls_migrate.services.coveralls_manager import fetch_repositories, plan_migration
from coveralls_migrate.services.github_manager import (
    add_repo_to_installation,
    find_coveralls_installation,
    get_github_repo_id,
    parse_repo_name,
)
from coveralls_migrate.services.report_manager import plan_message, render_report, success_message
from coveralls_migrate.utils.config_manager import COVERALLS_API_BASE
from coveralls_migrate.utils.logger import get_logger

logger = get_logger(__name__)


class MigrationEngine:
    """
    Moves an organization's Coveralls repositories from the OAuth App to the
    Coveralls Official GitHub App.

    Any MigrationError raised before the per-repository loop aborts the run.
    Inside the loop, failures are collected and the loop carries on.
    """

    def __init__(self, credentials: Credentials, coveralls_api_base: str = COVERALLS_API_BASE,
                 out: Optional[TextIO] = None):
        self.credentials = credentials
        self.coveralls_api_base = coveralls_api_base
        self.out = out
        logger.info(f"Migration engine initialized for organization '{credentials.org_name}'.")

    def _emit(self, message: str):
        print(message, file=self.out)

    def validate_credentials(self):
        logger.debug("Validating Coveralls and GitHub tokens...")
        validate_coveralls_token(self.credentials.coveralls_token, self.credentials.org_name, self.coveralls_api_base)
        validate_github_token(self.credentials.github_token)

    def find_installation(self) -> Installation:
        logger.debug("Looking up the Coveralls Official GitHub App installation...")
        return find_coveralls_installation(self.credentials.github_token, self.credentials.org_name)

    def fetch_migration_info(self) -> List[RepositoryRecord]:
        records = fetch_repositories(self.credentials.coveralls_token, self.credentials.org_name, self.coveralls_api_base)
        repos_to_migrate = plan_migration(records)
        self._emit(plan_message(len(repos_to_migrate)))
        return repos_to_migrate

    def resolve_target(self, record: RepositoryRecord) -> Optional[MigrationTarget]:
        owner, repo_name = parse_repo_name(record.name)
        github_id = get_github_repo_id(self.credentials.github_token, owner, repo_name)
        if github_id is None:
            return None
        return MigrationTarget(record=record, github_id=github_id)

    def migrate_repository(self, record: RepositoryRecord, installation: Installation) -> Optional[str]:
        """Migrate one repository. Returns a failure description, or None on success."""
        try:
            target = self.resolve_target(record)
        except InvalidRepositoryName:
            logger.warning(f"Skipping malformed repository name '{record.name}'")
            return f"{record.name}: Invalid repository name (expected 'owner/name')"

        if target is None:
            return f"{record.name}: Could not fetch GitHub repository ID"

        try:
            status_code = add_repo_to_installation(self.credentials.github_token, installation.id, target.github_id)
        except requests.RequestException as e:
            logger.warning(f"Failed to add '{target.name}' to installation {installation.id}: {e}")
            return f"{target.name}: Failed to add to GitHub App ({e})"

        if status_code != 204:
            logger.warning(f"Adding '{target.name}' to installation {installation.id} returned {status_code}")
            return f"{target.name}: Failed to add to GitHub App ({status_code})"

        self._emit(success_message(target.name))
        return None

    def migrate(self, repos_to_migrate: List[RepositoryRecord], installation: Installation) -> MigrationResult:
        failures = []
        for record in repos_to_migrate:
            logger.info(f"Migrating repository: {record.name}")
            failure = self.migrate_repository(record, installation)
            if failure:
                failures.append(failure)
        return MigrationResult(total=len(repos_to_migrate), failures=tuple(failures))

    def report(self, result: MigrationResult):
        self._emit(render_report(result))

    def run(self) -> MigrationResult:
        logger.info("Coveralls migration to GitHub App started")
        self.validate_credentials()
        installation = self.find_installation()
        repos_to_migrate = self.fetch_migration_info()
        result = self.migrate(repos_to_migrate, installation)
        self.report(result)
        if result.succeeded:
            logger.info(f"Migration finished: all {result.total} repositories migrated")
        else:
            logger.warning(f"Migration finished: {result.successful} migrated, {result.failed} failed")
        return result
