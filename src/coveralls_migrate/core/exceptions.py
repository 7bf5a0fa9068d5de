from typing import Optional


class MigrationError(Exception):
    """Fatal error: aborts the whole run before or instead of any install call."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.body = body

    def __str__(self) -> str:
        return self.message


class CredentialError(MigrationError):
    """A Coveralls or GitHub token was rejected."""


class InstallationError(MigrationError):
    """The Coveralls Official GitHub App installation is missing or belongs to another account."""


class RepositoryListError(MigrationError):
    """The organization's repository list could not be fetched from Coveralls."""


class InvalidRepositoryName(ValueError):
    """A repository slug is not of the form 'owner/name'."""
