# -----------------------------------------------------------------------------
# rv - Dual Licensed Software
# Copyright (c) 2025 Adem Can
#
# This file is part of rv.
#
# rv is available under a dual-license:
#   1. AGPLv3 (Affero General Public License v3)
#      - See LICENSE.txt and LICENSE-AGPL.txt
#      - Online: https://www.gnu.org/licenses/agpl-3.0.html
#
#   2. Commercial License
#      - For proprietary or revenue-generating use,
#        including SaaS, embedding in closed-source software,
#        or avoiding AGPL obligations.
#      - See LICENSE.txt and COMMERCIAL-LICENSE.txt
#      - Contact: ademfcan@gmail.com
#
# By using this file, you agree to the terms of one of the two licenses above.
# -----------------------------------------------------------------------------

import json
import subprocess
from pathlib import Path
from unittest.mock import Mock, patch

import pytest

from rv.core.exceptions import PullRequestError, ValidationError
from rv.core.object_store.object_store import ObjectStore
from rv.core.resolver.pull_request import GhPullRequestResolver, PrViewMetadata

BASE = "1" * 40
HEAD = "2" * 40

PR_JSON = json.dumps(
    {"number": 7, "baseRefName": "main", "baseRefOid": BASE, "headRefOid": HEAD}
)


def _completed(returncode=0, stdout="", stderr=""):
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout, stderr=stderr)


@pytest.fixture
def store():
    store = Mock(spec=ObjectStore)
    store.root = Path("/repo")
    store.commit_exists.return_value = True
    return store


def _gh_responses(pr_view=None, fetch=None):
    """subprocess.run side effect keyed on the command being run."""

    def run(cmd, **kwargs):
        if cmd[:2] == ["gh", "--version"]:
            return _completed(stdout="gh version 2.40.0\n")
        if cmd[:3] == ["gh", "pr", "view"]:
            return pr_view or _completed(stdout=PR_JSON)
        if cmd[:2] == ["git", "fetch"]:
            return fetch or _completed()
        raise AssertionError(f"unexpected command {cmd}")

    return run


def test_metadata_aliases():
    metadata = PrViewMetadata.model_validate(json.loads(PR_JSON))

    assert metadata.number == 7
    assert metadata.base_ref_name == "main"
    assert metadata.base_ref_oid == BASE
    assert metadata.head_ref_oid == HEAD


def test_resolve_with_local_commits(store):
    with patch("subprocess.run", side_effect=_gh_responses()) as run:
        base, head = GhPullRequestResolver(store).resolve("7")

    assert (base, head) == (BASE, HEAD)
    commands = [call.args[0] for call in run.call_args_list]
    assert ["git", "fetch", "origin", "main"] not in commands


def test_resolve_runs_in_repository_root_with_timeout(store):
    with patch("subprocess.run", side_effect=_gh_responses()) as run:
        GhPullRequestResolver(store, timeout=5).resolve("7")

    for call in run.call_args_list:
        assert call.kwargs["cwd"] == "/repo"
        assert call.kwargs["timeout"] == 5


def test_resolve_fetches_missing_commits(store):
    fetched = set()

    def commit_exists(sha):
        return sha in fetched

    def run(cmd, **kwargs):
        if cmd[:2] == ["git", "fetch"]:
            fetched.update({BASE, HEAD})
        return _gh_responses()(cmd, **kwargs)

    store.commit_exists.side_effect = commit_exists
    with patch("subprocess.run", side_effect=run) as mock_run:
        assert GhPullRequestResolver(store).resolve("7") == (BASE, HEAD)

    commands = [call.args[0] for call in mock_run.call_args_list]
    assert ["git", "fetch", "origin", "main"] in commands


def test_resolve_fetches_pull_head_ref(store):
    store.commit_exists.side_effect = lambda sha: sha == BASE or fetched_head[0]
    fetched_head = [False]

    def run(cmd, **kwargs):
        if cmd[:2] == ["git", "fetch"]:
            fetched_head[0] = True
        return _gh_responses()(cmd, **kwargs)

    with patch("subprocess.run", side_effect=run) as mock_run:
        GhPullRequestResolver(store).resolve("7")

    commands = [call.args[0] for call in mock_run.call_args_list]
    assert ["git", "fetch", "origin", "pull/7/head:refs/rv/pr/7"] in commands


def test_commit_still_missing_after_fetch(store):
    store.commit_exists.return_value = False

    with patch("subprocess.run", side_effect=_gh_responses()):
        with pytest.raises(PullRequestError) as excinfo:
            GhPullRequestResolver(store).resolve("7")
    assert "still missing after fetch" in excinfo.value.message


def test_fetch_failure(store):
    store.commit_exists.return_value = False

    with patch(
        "subprocess.run",
        side_effect=_gh_responses(fetch=_completed(returncode=128, stderr="fatal: no remote")),
    ):
        with pytest.raises(PullRequestError) as excinfo:
            GhPullRequestResolver(store).resolve("7")
    assert "git fetch origin main" in excinfo.value.message
    assert excinfo.value.details == "fatal: no remote"


def test_gh_not_installed(store):
    with patch("subprocess.run", side_effect=FileNotFoundError("gh")):
        with pytest.raises(PullRequestError) as excinfo:
            GhPullRequestResolver(store).resolve("7")
    assert "gh is not installed" in excinfo.value.message


def test_gh_timeout(store):
    with patch("subprocess.run", side_effect=subprocess.TimeoutExpired(["gh"], 1)):
        with pytest.raises(PullRequestError) as excinfo:
            GhPullRequestResolver(store, timeout=1).resolve("7")
    assert "timed out" in excinfo.value.message


def test_pr_view_failure(store):
    with patch(
        "subprocess.run",
        side_effect=_gh_responses(pr_view=_completed(returncode=1, stderr="no pull requests found")),
    ):
        with pytest.raises(PullRequestError) as excinfo:
            GhPullRequestResolver(store).resolve("999")
    assert excinfo.value.details == "no pull requests found"


def test_pr_view_bad_json(store):
    with patch(
        "subprocess.run",
        side_effect=_gh_responses(pr_view=_completed(stdout="{\"number\": 7}")),
    ):
        with pytest.raises(PullRequestError) as excinfo:
            GhPullRequestResolver(store).resolve("7")
    assert "Unable to parse" in excinfo.value.message


@pytest.mark.parametrize("pr_id", ["", "  ", "--help"])
def test_invalid_pr_id(store, pr_id):
    with patch("subprocess.run") as run:
        with pytest.raises(ValidationError):
            GhPullRequestResolver(store).resolve(pr_id)
    run.assert_not_called()
