from pathlib import Path

import pytest
import requests

from project_puller.errors import ManifestError
from project_puller.manifest import (
    load_security_insights,
    load_security_insights_from_github,
    parse_github_reference,
    parse_security_insights,
)
from project_puller.settings import settings

SAMPLE_MANIFEST = """\
header:
  schema-version: 2.0.0
  last-updated: '2024-05-01'
  url: https://github.com/acme/widget/blob/main/security-insights.yml
project:
  name: Widget
  administrators:
    - name: Jane Doe
  repositories:
    - name: Widget Core
      url: https://github.com/acme/widget
      comment: Main code base.
    - url: git@github.com:acme/widget-docs.git
"""


class StubResponse:
    def __init__(self, status_code: int = 200, content: bytes = b"", reason: str = "OK") -> None:
        self.status_code = status_code
        self.content = content
        self.reason = reason


def test_parse_security_insights_reads_repositories() -> None:
    insights = parse_security_insights(SAMPLE_MANIFEST)

    assert insights.project is not None
    assert insights.project.name == "Widget"
    assert [repo.url for repo in insights.repositories] == [
        "https://github.com/acme/widget",
        "git@github.com:acme/widget-docs.git",
    ]
    assert insights.repositories[0].name == "Widget Core"
    assert insights.repositories[1].name is None


def test_document_without_project_has_no_repositories() -> None:
    insights = parse_security_insights("header:\n  schema-version: 2.0.0\n")
    assert insights.project is None
    assert insights.repositories == []


@pytest.mark.parametrize(
    "contents",
    [
        "project: [unterminated",
        "- just\n- a\n- list\n",
        "project:\n  repositories:\n    - name: missing url\n",
    ],
)
def test_parse_security_insights_rejects_bad_documents(contents: str) -> None:
    with pytest.raises(ManifestError):
        parse_security_insights(contents)


def test_load_from_local_file(tmp_path: Path) -> None:
    manifest = tmp_path / "security-insights.yml"
    manifest.write_text(SAMPLE_MANIFEST)

    insights = load_security_insights(str(manifest))

    assert len(insights.repositories) == 2


def test_load_from_missing_file(tmp_path: Path) -> None:
    with pytest.raises(ManifestError, match="failed to read file"):
        load_security_insights(str(tmp_path / "absent.yml"))


def test_load_from_url(monkeypatch: pytest.MonkeyPatch) -> None:
    calls = []

    def fake_get(url, headers=None, timeout=None):
        calls.append((url, timeout))
        return StubResponse(content=SAMPLE_MANIFEST.encode("utf-8"))

    monkeypatch.setattr("project_puller.manifest.loader.requests.get", fake_get)
    monkeypatch.setattr(settings, "request_timeout", 7)

    insights = load_security_insights("https://example.com/security-insights.yml")

    assert insights.project.name == "Widget"
    assert calls == [("https://example.com/security-insights.yml", 7)]


def test_load_from_url_with_bad_status(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        "project_puller.manifest.loader.requests.get",
        lambda url, headers=None, timeout=None: StubResponse(404, reason="Not Found"),
    )
    with pytest.raises(ManifestError, match="404"):
        load_security_insights("https://example.com/missing.yml")


def test_load_from_unreachable_url(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_get(url, headers=None, timeout=None):
        raise requests.ConnectionError("connection refused")

    monkeypatch.setattr("project_puller.manifest.loader.requests.get", fake_get)
    with pytest.raises(ManifestError, match="failed to fetch URL"):
        load_security_insights("https://unreachable.invalid/si.yml")


def test_load_from_github_uses_contents_api(monkeypatch: pytest.MonkeyPatch) -> None:
    captured = {}

    def fake_get(url, headers=None, timeout=None):
        captured["url"] = url
        captured["headers"] = headers
        return StubResponse(content=SAMPLE_MANIFEST.encode("utf-8"))

    monkeypatch.setattr("project_puller.manifest.loader.requests.get", fake_get)
    monkeypatch.setattr(settings, "github_api_root", "https://api.github.com")
    monkeypatch.setattr(settings, "github_manifest_path", "security-insights.yml")
    monkeypatch.setattr(settings, "github_token", "token-123")

    insights = load_security_insights_from_github("acme", "widget")

    assert insights.project.name == "Widget"
    assert captured["url"] == "https://api.github.com/repos/acme/widget/contents/security-insights.yml"
    assert captured["headers"]["Accept"] == "application/vnd.github.raw+json"
    assert captured["headers"]["Authorization"] == "Bearer token-123"


def test_load_from_github_reports_failures(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        "project_puller.manifest.loader.requests.get",
        lambda url, headers=None, timeout=None: StubResponse(404, reason="Not Found"),
    )
    with pytest.raises(ManifestError, match="failed to read from GitHub"):
        load_security_insights_from_github("acme", "widget", "docs/si.yml")


def test_parse_github_reference() -> None:
    assert parse_github_reference("acme/widget") == ("acme", "widget", None)
    assert parse_github_reference("acme/widget/docs/si.yml") == ("acme", "widget", "docs/si.yml")


@pytest.mark.parametrize("value", ["acme", "acme/", "/widget", ""])
def test_parse_github_reference_requires_owner_and_repo(value: str) -> None:
    with pytest.raises(ManifestError):
        parse_github_reference(value)
