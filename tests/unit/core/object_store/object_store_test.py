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

from pathlib import Path
from unittest.mock import Mock, patch

import pytest

from rv.core.data.tree_snapshot import RevisionRef, TreeSnapshot
from rv.core.exceptions import FileSystemError, NoParent, NotFound, RepositoryUnavailable
from rv.core.git_interface.interface import GitInterface
from rv.core.object_store.object_store import ObjectStore

FULL_SHA = "a" * 40
TREE_SHA = "b" * 40


@pytest.fixture
def mock_git():
    return Mock(spec=GitInterface)


@pytest.fixture
def store(mock_git):
    return ObjectStore(mock_git, Path("/repo"))


def _responder(mapping):
    """run_git_text_out side effect answering by the last argument."""

    def respond(args, **kwargs):
        return mapping.get(args[-1])

    return respond


# ============================================================================
# Revision Resolution
# ============================================================================


def test_resolve_full_hash(store, mock_git):
    mock_git.run_git_text_out.side_effect = _responder(
        {FULL_SHA: "commit\n", f"{FULL_SHA}^{{commit}}": FULL_SHA + "\n"}
    )

    assert store.resolve_revision(FULL_SHA) == RevisionRef(FULL_SHA)


def test_resolve_short_hash_expands(store, mock_git):
    mock_git.run_git_text_out.side_effect = _responder(
        {"aaaa": "commit\n", "aaaa^{commit}": FULL_SHA + "\n"}
    )

    assert store.resolve_revision("aaaa").oid == FULL_SHA


def test_resolve_expression(store, mock_git):
    mock_git.run_git_text_out.side_effect = _responder(
        {"HEAD~1^{commit}": FULL_SHA + "\n"}
    )

    assert store.resolve_revision("HEAD~1") == RevisionRef(FULL_SHA)


def test_resolve_hex_that_is_a_branch_name(store, mock_git):
    # "cafe" is not an object, but a branch called cafe exists
    mock_git.run_git_text_out.side_effect = _responder(
        {"cafe^{commit}": FULL_SHA + "\n"}
    )

    assert store.resolve_revision("cafe").oid == FULL_SHA


def test_resolve_unknown_revision(store, mock_git):
    mock_git.run_git_text_out.return_value = None

    with pytest.raises(NotFound) as excinfo:
        store.resolve_revision("does-not-exist")
    assert "does-not-exist" in excinfo.value.message


@pytest.mark.parametrize("text", ["", "   ", "--all", "-n"])
def test_resolve_rejects_empty_and_options(store, mock_git, text):
    with pytest.raises(NotFound):
        store.resolve_revision(text)
    mock_git.run_git_text_out.assert_not_called()


def _existing_refs(*refs):
    """run_git_text side effect for `show-ref --verify` over a fixed set of refs."""

    def respond(args, input_text=None):
        return Mock(returncode=0) if args[-1] in refs else None

    return respond


def test_resolve_branch(store, mock_git):
    mock_git.run_git_text.side_effect = _existing_refs("refs/heads/feature")
    mock_git.run_git_text_out.side_effect = _responder(
        {"refs/heads/feature^{commit}": FULL_SHA + "\n"}
    )

    assert store.resolve_branch("feature").oid == FULL_SHA
    assert store.has_branch("feature")
    assert not store.has_branch("other")


def test_resolve_missing_branch(store, mock_git):
    mock_git.run_git_text.return_value = None

    with pytest.raises(NotFound) as excinfo:
        store.resolve_branch("feature")
    assert "Branch not found: feature" in excinfo.value.message


@pytest.mark.parametrize("expression", ["main~1", "main^", "main@{1}", "HEAD"])
def test_resolve_branch_rejects_revision_expressions(store, mock_git, expression):
    mock_git.run_git_text.side_effect = _existing_refs("refs/heads/main")
    mock_git.run_git_text_out.return_value = FULL_SHA + "\n"

    with pytest.raises(NotFound):
        store.resolve_branch(expression)
    assert not store.has_branch(expression)
    show_ref = mock_git.run_git_text.call_args[0][0]
    assert show_ref == ["show-ref", "--verify", "--quiet", f"refs/heads/{expression}"]


# ============================================================================
# Trees and Parents
# ============================================================================


def test_tree_of(store, mock_git):
    mock_git.run_git_text_out.return_value = TREE_SHA + "\n"

    assert store.tree_of(RevisionRef(FULL_SHA)) == TreeSnapshot.of_tree(TREE_SHA)
    args = mock_git.run_git_text_out.call_args[0][0]
    assert args[-1] == f"{FULL_SHA}^{{tree}}"


def test_parent_of(store, mock_git):
    parent = "c" * 40
    mock_git.run_git_text_out.side_effect = _responder(
        {f"{FULL_SHA}^1^{{commit}}": parent + "\n"}
    )

    assert store.parent_of(RevisionRef(FULL_SHA)).oid == parent


def test_parent_of_root_commit(store, mock_git):
    mock_git.run_git_text_out.return_value = None

    with pytest.raises(NoParent):
        store.parent_of(RevisionRef(FULL_SHA))


def test_current_head_unborn(store, mock_git):
    mock_git.run_git_text_out.return_value = None

    assert store.current_head() is None


def test_staged_index_tree(store):
    assert store.staged_index_tree().is_index


def test_empty_tree_id_is_cached(store, mock_git):
    mock_git.run_git_text_out.return_value = "4b825dc642cb6eb9a060e54bf8d69288fbee4904\n"

    assert store.empty_tree_id() == "4b825dc642cb6eb9a060e54bf8d69288fbee4904"
    assert store.empty_tree_id() == "4b825dc642cb6eb9a060e54bf8d69288fbee4904"
    assert mock_git.run_git_text_out.call_count == 1
    args = mock_git.run_git_text_out.call_args[0][0]
    assert "-w" not in args


def test_commit_exists(store, mock_git):
    mock_git.run_git_text.return_value = Mock(returncode=0)
    assert store.commit_exists(FULL_SHA)

    mock_git.run_git_text.return_value = None
    assert not store.commit_exists(FULL_SHA)


# ============================================================================
# Discovery
# ============================================================================


def test_discover_outside_repository(tmp_path):
    with patch(
        "rv.core.object_store.object_store.SubprocessGitInterface.run_git_text_out",
        return_value=None,
    ):
        with pytest.raises(RepositoryUnavailable) as excinfo:
            ObjectStore.discover(tmp_path)
    assert "Not a git repository" in excinfo.value.message


def test_discover_bare_repository(tmp_path):
    with patch(
        "rv.core.object_store.object_store.SubprocessGitInterface.run_git_text_out",
        return_value="true\n",
    ):
        with pytest.raises(RepositoryUnavailable) as excinfo:
            ObjectStore.discover(tmp_path)
    assert "bare" in excinfo.value.message.lower()


def test_discover_uses_toplevel(tmp_path):
    (tmp_path / "sub").mkdir()
    answers = {"--is-bare-repository": "false\n", "--show-toplevel": f"{tmp_path}\n"}
    with patch(
        "rv.core.object_store.object_store.SubprocessGitInterface.run_git_text_out",
        side_effect=lambda args, **kwargs: answers[args[-1]],
    ):
        store = ObjectStore.discover(tmp_path / "sub")

    assert store.root == tmp_path
    assert store.git.repo_path == tmp_path


def test_discover_missing_directory(tmp_path):
    with pytest.raises(FileSystemError) as excinfo:
        ObjectStore.discover(tmp_path / "missing")
    assert "not a directory" in excinfo.value.message
