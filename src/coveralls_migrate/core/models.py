from dataclasses import dataclass, field
from typing import Optional, Tuple, Dict, Any


@dataclass(frozen=True)
class Credentials:
    coveralls_token: str
    github_token: str
    org_name: str

    def __repr__(self) -> str:
        return f"Credentials(coveralls_token='****', github_token='****', org_name={self.org_name!r})"


@dataclass(frozen=True)
class Installation:
    """A GitHub App installation as listed by ``/user/installations``."""

    id: int
    app_slug: str
    account_login: str

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Installation":
        if not isinstance(data["id"], int):
            raise TypeError(f"installation id must be an integer, got {data['id']!r}")
        return cls(
            id=data["id"],
            app_slug=data.get("app_slug"),
            account_login=(data.get("account") or {}).get("login"),
        )


@dataclass(frozen=True)
class RepositoryRecord:
    """A repository's migration state as reported by Coveralls."""

    name: str
    github_install_id: Optional[int] = None
    github_app_disabled: bool = False

    @property
    def needs_migration(self) -> bool:
        return self.github_install_id is None or bool(self.github_app_disabled)

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "RepositoryRecord":
        if not isinstance(data["name"], str):
            raise TypeError(f"repository name must be a string, got {data['name']!r}")
        return cls(
            name=data["name"],
            github_install_id=data.get("github_install_id"),
            github_app_disabled=bool(data.get("github_app_disabled")),
        )


@dataclass(frozen=True)
class MigrationTarget:
    record: RepositoryRecord
    github_id: int

    @property
    def name(self) -> str:
        return self.record.name


@dataclass(frozen=True)
class MigrationResult:
    """Outcome of a migration batch. ``failures`` keeps repository order."""

    total: int
    failures: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def failed(self) -> int:
        return len(self.failures)

    @property
    def successful(self) -> int:
        return self.total - self.failed

    @property
    def succeeded(self) -> bool:
        return not self.failures
