"""Read-only access to a repository's nightly workflow runs.

fetch_workflow_runs() never raises. Every failure comes back as FetchErr
and the fallback decision is left to the caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Union

import requests
from github import Github, GithubException

from nightlens_core.models import BuildRecord, normalize_conclusion

logger = logging.getLogger(__name__)

DEFAULT_PER_PAGE = 50


@dataclass(frozen=True)
class FetchOk:
    builds: list[BuildRecord] = field(default_factory=list)
    total_count: int = 0


@dataclass(frozen=True)
class FetchErr:
    reason: str


FetchResult = Union[FetchOk, FetchErr]


def get_repo(repo_name: str, per_page: int = DEFAULT_PER_PAGE, client: Github | None = None):
    gh = client or Github(per_page=per_page)
    return gh.get_repo(repo_name)


def find_nightly_workflow(repo, name: str, path_hint: str):
    """Return the first workflow named `name` or whose file path contains `path_hint`, or None."""
    for workflow in repo.get_workflows():
        if workflow.name == name or path_hint in (workflow.path or ""):
            return workflow
    return None


def run_to_build(run) -> BuildRecord:
    created_at = run.created_at
    if created_at is None:
        raise ValueError(f"run #{run.run_number} has no created_at")
    return BuildRecord(
        timestamp=created_at,
        outcome=normalize_conclusion(run.conclusion),
        run_number=int(run.run_number),
        source_conclusion=run.conclusion,
        url=run.html_url,
    )


def fetch_workflow_runs(
    repo_name: str,
    workflow_name: str,
    path_hint: str,
    per_page: int = DEFAULT_PER_PAGE,
    client: Github | None = None,
) -> FetchResult:
    """Fetch the newest page of completed runs for the nightly workflow."""
    try:
        repo = get_repo(repo_name, per_page=per_page, client=client)
        workflow = find_nightly_workflow(repo, workflow_name, path_hint)
        if workflow is None:
            return FetchErr(f"Workflow {workflow_name!r} not found in {repo_name}")

        runs = workflow.get_runs(status="completed")
        builds = [run_to_build(run) for run in runs.get_page(0)]
        total_count = runs.totalCount or len(builds)
    except GithubException as e:
        logger.error("GitHub API error fetching runs for %s: %s", repo_name, e)
        return FetchErr(f"GitHub API error ({e.status})")
    except requests.RequestException as e:
        logger.error("Network error fetching runs for %s: %s", repo_name, e)
        return FetchErr(f"Network error ({type(e).__name__})")
    except (AttributeError, TypeError, ValueError) as e:
        logger.error("Malformed workflow run data for %s: %s", repo_name, e)
        return FetchErr(f"Malformed response ({type(e).__name__})")
    except Exception as e:
        # BadAttributeException is not a GithubException subclass
        logger.exception("Unexpected error fetching runs for %s", repo_name)
        return FetchErr(f"Unexpected error ({type(e).__name__})")

    logger.debug("Fetched %d runs (total %d) for %s", len(builds), total_count, repo_name)
    return FetchOk(builds=builds, total_count=total_count)
