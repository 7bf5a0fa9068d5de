"""Tests for the Coveralls repository list and migration planning."""

from unittest.mock import patch

import pytest
import requests

from coveralls_migrate.core.exceptions import RepositoryListError
from coveralls_migrate.core.models import RepositoryRecord
from coveralls_migrate.services.coveralls_manager import (
    coveralls_repos_url,
    fetch_repositories,
    plan_migration,
)

from conftest import COVERALLS_REPOS_URL, ORG_NAME


class TestCoverallsReposUrl:
    def test_default_base(self):
        assert coveralls_repos_url(ORG_NAME) == COVERALLS_REPOS_URL

    def test_custom_base_and_quoting(self):
        url = coveralls_repos_url("my org", "https://coveralls.example.com/api/")
        assert url == "https://coveralls.example.com/api/repos/github/my%20org"


class TestFetchRepositories:
    def test_parses_records(self, http):
        http.add("GET", COVERALLS_REPOS_URL, 200, [
            {"name": "org/a", "github_install_id": None},
            {"name": "org/b", "github_install_id": 16, "github_app_disabled": True},
        ])

        records = fetch_repositories("token", ORG_NAME)

        assert records == [
            RepositoryRecord("org/a", None, False),
            RepositoryRecord("org/b", 16, True),
        ]

    def test_non_200_is_fatal(self, http):
        http.add("GET", COVERALLS_REPOS_URL, 500, {"error": "Internal server error"})

        with pytest.raises(RepositoryListError) as exc_info:
            fetch_repositories("token", ORG_NAME)

        assert exc_info.value.status_code == 500
        assert str(exc_info.value).startswith("Error retrieving repositories from Coveralls: 500: ")

    def test_transport_error_is_fatal(self):
        with patch("requests.get", side_effect=requests.ConnectionError("down")):
            with pytest.raises(RepositoryListError, match="down"):
                fetch_repositories("token", ORG_NAME)

    @pytest.mark.parametrize("body", [
        "<html>maintenance</html>",
        {"error": "not a list"},
        [{"github_install_id": None}, {"name": "org/a"}],
        [{"name": None}],
        ["org/a"],
    ])
    def test_unusable_body_is_fatal(self, http, body):
        http.add("GET", COVERALLS_REPOS_URL, 200, body)

        with pytest.raises(RepositoryListError, match="Error retrieving repositories from Coveralls") as exc_info:
            fetch_repositories("token", ORG_NAME)

        assert exc_info.value.status_code == 200


class TestPlanMigration:
    def test_missing_install_id_needs_migration(self):
        records = [RepositoryRecord("org/a"), RepositoryRecord("org/b")]
        assert plan_migration(records) == records

    def test_installed_repositories_are_skipped(self):
        assert plan_migration([RepositoryRecord("org/repo", 16)]) == []

    def test_disabled_app_needs_migration(self):
        disabled = RepositoryRecord("org/b", 16, True)
        assert plan_migration([RepositoryRecord("org/a", 16), disabled]) == [disabled]

    def test_source_order_is_kept(self):
        records = [RepositoryRecord(name) for name in ("org/c", "org/a", "org/b")]
        assert [r.name for r in plan_migration(records)] == ["org/c", "org/a", "org/b"]

    def test_from_api_defaults(self):
        record = RepositoryRecord.from_api({"name": "org/repo"})
        assert record.github_install_id is None
        assert record.github_app_disabled is False
        assert record.needs_migration
