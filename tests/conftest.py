"""Pytest configuration and fixtures for the Coveralls migration tests."""

import json
from unittest.mock import patch

import pytest

from coveralls_migrate.utils.logger import reset_logging

ORG_NAME = "coverallsapp"
COVERALLS_REPOS_URL = f"https://coveralls.io/api/repos/github/{ORG_NAME}"
GITHUB_ORGS_URL = "https://api.github.com/user/orgs"
GITHUB_INSTALLATIONS_URL = "https://api.github.com/user/installations"
INSTALLATION_ID = 35578911

ENV_VARS = (
    "COVERALLS_TOKEN",
    "COVERALLS_API_BASE",
    "GITHUB_TOKEN",
    "COVERALLS_ORG_NAME",
    "COVERALLS_MIGRATE_LOG_LEVEL_CONSOLE",
    "COVERALLS_MIGRATE_LOG_LEVEL_FILE",
    "COVERALLS_MIGRATE_LOG_MAX_BYTES",
    "COVERALLS_MIGRATE_LOG_BACKUP_COUNT",
)


class FakeResponse:
    def __init__(self, status_code, body=None):
        self.status_code = status_code
        self._body = body

    @property
    def text(self):
        if self._body is None:
            return ""
        if isinstance(self._body, str):
            return self._body
        return json.dumps(self._body)

    def json(self):
        if isinstance(self._body, str):
            return json.loads(self._body)
        return self._body


class FakeGitHubAndCoveralls:
    """
    Routes ``requests.get``/``requests.put`` calls by (method, url).

    A route holds either one response, reused for every call, or a list
    consumed in order (the last entry repeats once the list runs out).
    """

    def __init__(self):
        self.routes = {}
        self.calls = []

    def add(self, method, url, status_code, body=None):
        self.routes[(method, url)] = FakeResponse(status_code, body)

    def add_sequence(self, method, url, *responses):
        self.routes[(method, url)] = [FakeResponse(status, body) for status, body in responses]

    def _dispatch(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs.get("headers", {})))
        route = self.routes.get((method, url))
        if route is None:
            return FakeResponse(404, {"message": "Not Found"})
        if isinstance(route, list):
            return route.pop(0) if len(route) > 1 else route[0]
        return route

    def get(self, url, **kwargs):
        return self._dispatch("GET", url, **kwargs)

    def put(self, url, **kwargs):
        return self._dispatch("PUT", url, **kwargs)

    def requested(self, method, url):
        return [c for c in self.calls if c[0] == method and c[1] == url]

    def puts(self):
        return [c for c in self.calls if c[0] == "PUT"]


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """No config file, no credential env vars, no log file."""
    monkeypatch.chdir(tmp_path)
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("COVERALLS_MIGRATE_LOG_FILE", "")
    yield
    reset_logging()


@pytest.fixture
def http():
    fake = FakeGitHubAndCoveralls()
    with patch("requests.get", side_effect=fake.get), patch("requests.put", side_effect=fake.put):
        yield fake


@pytest.fixture
def happy_path(http):
    """Two repositories needing migration, both resolvable and installable."""
    http.add("GET", COVERALLS_REPOS_URL, 200, [
        {"name": "coverallsapp/coveralls", "github_install_id": None},
        {"name": "coverallsapp/gitsurance", "github_install_id": None},
    ])
    http.add("GET", GITHUB_ORGS_URL, 200, [{"login": ORG_NAME, "id": 123}])
    http.add("GET", GITHUB_INSTALLATIONS_URL, 200, {
        "installations": [
            {
                "id": INSTALLATION_ID,
                "app_id": 54321,
                "app_slug": "coveralls-official",
                "account": {"login": ORG_NAME, "id": 123},
            }
        ]
    })
    http.add("GET", "https://api.github.com/repos/coverallsapp/coveralls", 200, {"id": 7777, "name": "coveralls"})
    http.add("GET", "https://api.github.com/repos/coverallsapp/gitsurance", 200, {"id": 8888, "name": "gitsurance"})
    http.add("PUT", f"{GITHUB_INSTALLATIONS_URL}/{INSTALLATION_ID}/repositories/7777", 204)
    http.add("PUT", f"{GITHUB_INSTALLATIONS_URL}/{INSTALLATION_ID}/repositories/8888", 204)
    return http
