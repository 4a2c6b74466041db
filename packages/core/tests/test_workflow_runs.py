"""Tests for the GitHub workflow run fetcher."""

from __future__ import annotations

from datetime import datetime, timezone
from unittest.mock import MagicMock

import requests
from github import GithubException
from github.GithubException import BadAttributeException

from nightlens_core.gh.workflow_runs import (
    FetchErr,
    FetchOk,
    fetch_workflow_runs,
    find_nightly_workflow,
    run_to_build,
)
from nightlens_core.models import FAILURE, SUCCESS


def _workflow(name: str, path: str):
    w = MagicMock()
    w.name = name
    w.path = path
    return w


def _run(run_number: int, conclusion: str | None, day: int):
    r = MagicMock()
    r.run_number = run_number
    r.conclusion = conclusion
    r.created_at = datetime(2026, 10, day, 3, 0, tzinfo=timezone.utc)
    r.html_url = f"https://github.com/owner/repo/actions/runs/{run_number}"
    return r


def _client(workflows, runs=None, total_count=0):
    """Return a mocked Github client whose repo exposes the given workflows."""
    client = MagicMock()
    repo = client.get_repo.return_value
    repo.get_workflows.return_value = workflows
    for w in workflows:
        paginated = w.get_runs.return_value
        paginated.get_page.return_value = runs or []
        paginated.totalCount = total_count
    return client


class TestFindNightlyWorkflow:
    def test_matches_by_name(self):
        repo = MagicMock()
        nightly = _workflow("Nightly Build", ".github/workflows/release.yml")
        repo.get_workflows.return_value = [_workflow("CI", ".github/workflows/ci.yml"), nightly]
        assert find_nightly_workflow(repo, "Nightly Build", "nightly_build") is nightly

    def test_matches_by_path(self):
        repo = MagicMock()
        nightly = _workflow("Nightly", ".github/workflows/nightly_build.yml")
        repo.get_workflows.return_value = [nightly]
        assert find_nightly_workflow(repo, "Nightly Build", "nightly_build") is nightly

    def test_returns_none_when_absent(self):
        repo = MagicMock()
        repo.get_workflows.return_value = [_workflow("CI", ".github/workflows/ci.yml")]
        assert find_nightly_workflow(repo, "Nightly Build", "nightly_build") is None

    def test_handles_missing_path(self):
        repo = MagicMock()
        repo.get_workflows.return_value = [_workflow("CI", None)]
        assert find_nightly_workflow(repo, "Nightly Build", "nightly_build") is None


class TestRunToBuild:
    def test_maps_fields(self):
        build = run_to_build(_run(672, "success", 16))
        assert build.run_number == 672
        assert build.outcome == SUCCESS
        assert build.source_conclusion == "success"
        assert build.timestamp == datetime(2026, 10, 16, 3, tzinfo=timezone.utc)
        assert build.url.endswith("/672")

    def test_non_success_is_failure(self):
        build = run_to_build(_run(671, "cancelled", 15))
        assert build.outcome == FAILURE
        assert build.source_conclusion == "cancelled"


class TestFetchWorkflowRuns:
    def test_success(self):
        runs = [_run(672, "success", 16), _run(671, "failure", 15)]
        client = _client([_workflow("Nightly Build", ".github/workflows/nightly_build.yml")], runs, total_count=672)

        result = fetch_workflow_runs("owner/repo", "Nightly Build", "nightly_build", client=client)

        assert isinstance(result, FetchOk)
        assert [b.run_number for b in result.builds] == [672, 671]
        assert result.total_count == 672
        client.get_repo.assert_called_once_with("owner/repo")

    def test_requests_completed_runs_first_page(self):
        workflow = _workflow("Nightly Build", "nightly_build.yml")
        client = _client([workflow], [_run(1, "success", 16)], total_count=1)

        fetch_workflow_runs("owner/repo", "Nightly Build", "nightly_build", client=client)

        workflow.get_runs.assert_called_once_with(status="completed")
        workflow.get_runs.return_value.get_page.assert_called_once_with(0)

    def test_zero_total_count_falls_back_to_len(self):
        client = _client([_workflow("Nightly Build", "x.yml")], [_run(1, "success", 16)], total_count=0)
        result = fetch_workflow_runs("owner/repo", "Nightly Build", "nightly_build", client=client)
        assert result.total_count == 1

    def test_missing_workflow_is_err(self):
        client = _client([_workflow("CI", "ci.yml")])
        result = fetch_workflow_runs("owner/repo", "Nightly Build", "nightly_build", client=client)
        assert isinstance(result, FetchErr)
        assert "not found" in result.reason

    def test_github_exception_is_err(self):
        client = MagicMock()
        client.get_repo.side_effect = GithubException(404, {"message": "Not Found"}, None)

        result = fetch_workflow_runs("owner/repo", "Nightly Build", "nightly_build", client=client)

        assert isinstance(result, FetchErr)
        assert "404" in result.reason

    def test_network_error_is_err(self):
        client = MagicMock()
        client.get_repo.side_effect = requests.ConnectionError("connection refused")

        result = fetch_workflow_runs("owner/repo", "Nightly Build", "nightly_build", client=client)

        assert isinstance(result, FetchErr)
        assert "Network error" in result.reason

    def test_bad_attribute_is_err(self):
        client = MagicMock()
        client.get_repo.side_effect = BadAttributeException("x", str, None)

        result = fetch_workflow_runs("owner/repo", "Nightly Build", "nightly_build", client=client)

        assert isinstance(result, FetchErr)
        assert "BadAttributeException" in result.reason

    def test_unexpected_error_is_err(self):
        client = MagicMock()
        client.get_repo.side_effect = KeyError("workflows")

        result = fetch_workflow_runs("owner/repo", "Nightly Build", "nightly_build", client=client)

        assert isinstance(result, FetchErr)
        assert result.reason == "Unexpected error (KeyError)"

    def test_malformed_run_is_err(self):
        bad = _run(3, "success", 16)
        bad.created_at = None
        client = _client([_workflow("Nightly Build", "x.yml")], [bad], total_count=1)

        result = fetch_workflow_runs("owner/repo", "Nightly Build", "nightly_build", client=client)

        assert isinstance(result, FetchErr)
        assert "Malformed" in result.reason
