"""
Tests for the read side: content bundles, history, single commits,
downloads and diffs.
"""

import hashlib
from datetime import datetime, timezone

import pytest

from teamcode.core.errors import ClientError, NotFoundError
from teamcode.core.vcs import commit_engine, queries
from teamcode.core.vcs.branches import Branch, latest_commit, latest_content, parse_branch
from teamcode.models import CodeCommit


def test_robot_scenario(db_session, notifier, code_file):
    drafts = queries.get_history(db_session, code_file.id, "drafts")
    assert [c.content for c in drafts] == ["// empty"]

    commit_engine.save_draft(db_session, code_file.id, "class Robot {}", 7)
    commit_engine.publish(db_session, notifier, code_file.id, "Initial version", 7)

    bundle = queries.get_content_bundle(db_session, code_file.id)
    assert bundle.drafts_content == "class Robot {}"
    assert bundle.main_content == "class Robot {}"
    assert bundle.file.file_name == "Robot.java"
    assert len(bundle.commits) == 3
    assert [c.branch for c in bundle.commits] == ["main", "drafts", "drafts"]
    assert [c.message for c in bundle.commits] == ["Initial version", "Auto-save", "Initial draft"]


def test_bundle_without_main_has_empty_main_content(db_session, code_file):
    bundle = queries.get_content_bundle(db_session, code_file.id)
    assert bundle.content.drafts == "// empty"
    assert bundle.content.main == ""


def test_bundle_annotates_author_names(db_session, notifier, code_file):
    commit_engine.save_draft(db_session, code_file.id, "by a stranger", 555)
    source = latest_commit(db_session, code_file.id, Branch.DRAFTS)
    commit_engine.revert(db_session, notifier, source.id, "main")

    commits = queries.get_content_bundle(db_session, code_file.id).commits
    assert [c.author_name for c in commits] == [None, None, "Ada Lovelace"]


def test_bundle_unknown_file(db_session):
    with pytest.raises(NotFoundError):
        queries.get_content_bundle(db_session, 77)


def test_history_defaults_to_main(db_session, notifier, code_file):
    commit_engine.publish(db_session, notifier, code_file.id, None, 7)
    history = queries.get_history(db_session, code_file.id)
    assert [c.branch for c in history] == ["main"]


def test_history_of_unknown_file_is_empty(db_session):
    assert queries.get_history(db_session, 77, "drafts") == []


def test_history_rejects_unknown_branch(db_session, code_file):
    with pytest.raises(ClientError):
        queries.get_history(db_session, code_file.id, "develop")


def test_same_timestamp_resolved_by_id(db_session, code_file):
    moment = datetime(2030, 1, 1, tzinfo=timezone.utc)
    for content in ("first", "second"):
        db_session.add(CodeCommit(
            team_id=1, file_id=code_file.id, branch="drafts", author_id=7,
            message="Auto-save", content=content, hash=f"draft-{content}", created_at=moment,
        ))
        db_session.commit()

    assert latest_content(db_session, code_file.id, Branch.DRAFTS) == "second"
    history = queries.get_history(db_session, code_file.id, "drafts")
    assert [c.content for c in history[:2]] == ["second", "first"]


def test_get_commit_includes_author_and_file_name(db_session, code_file):
    draft = latest_commit(db_session, code_file.id, Branch.DRAFTS)

    commit = queries.get_commit(db_session, draft.id)

    assert commit.id == draft.id
    assert commit.author_name == "Ada Lovelace"
    assert commit.file_name == "Robot.java"
    assert commit.content == "// empty"
    assert commit.content_sha256 == hashlib.sha256(b"// empty").hexdigest()


def test_get_commit_unknown(db_session):
    with pytest.raises(NotFoundError):
        queries.get_commit(db_session, 1)


def test_download_before_publish_is_not_found(db_session, code_file):
    with pytest.raises(NotFoundError):
        queries.download(db_session, code_file.id, "main")


def test_download_after_publish(db_session, notifier, code_file):
    commit_engine.save_draft(db_session, code_file.id, "class Robot {}", 7)
    commit_engine.publish(db_session, notifier, code_file.id, None, 7)

    body, filename = queries.download(db_session, code_file.id)

    assert body == b"class Robot {}"
    assert filename == "Robot.java"


def test_download_drafts_branch(db_session, code_file):
    body, filename = queries.download(db_session, code_file.id, Branch.DRAFTS)
    assert body == b"// empty"
    assert filename == "Robot.java"


def test_download_unknown_file(db_session):
    with pytest.raises(NotFoundError):
        queries.download(db_session, 77)


def test_diff_commits(db_session, code_file):
    first = latest_commit(db_session, code_file.id, Branch.DRAFTS)
    commit_engine.save_draft(db_session, code_file.id, "// empty\nclass Robot {}\n", 7)
    second = latest_commit(db_session, code_file.id, Branch.DRAFTS)

    result = queries.diff_commits(db_session, first.id, second.id)

    assert result.base_hash == first.hash
    assert result.head_hash == second.hash
    assert f"--- a/{first.hash}" in result.diff
    assert "+class Robot {}" in result.diff


def test_diff_identical_commits_is_empty(db_session, notifier, code_file):
    draft = latest_commit(db_session, code_file.id, Branch.DRAFTS)
    commit_engine.publish(db_session, notifier, code_file.id, None, 7)
    main = latest_commit(db_session, code_file.id, Branch.MAIN)

    assert queries.diff_commits(db_session, draft.id, main.id).diff == ""


def test_diff_commits_unknown(db_session, code_file):
    draft = latest_commit(db_session, code_file.id, Branch.DRAFTS)
    with pytest.raises(NotFoundError):
        queries.diff_commits(db_session, draft.id, 999)
    with pytest.raises(NotFoundError):
        queries.diff_commits(db_session, 999, draft.id)


def test_diff_branches_shows_unpublished_changes(db_session, notifier, code_file):
    commit_engine.publish(db_session, notifier, code_file.id, None, 7)
    commit_engine.save_draft(db_session, code_file.id, "// empty\nint x;\n", 7)

    result = queries.diff_branches(db_session, code_file.id)

    assert result.base_hash == latest_commit(db_session, code_file.id, Branch.MAIN).hash
    assert result.head_hash.startswith("draft-")
    assert "--- main/src/Robot.java" in result.diff
    assert "+int x;" in result.diff


def test_diff_branches_without_main(db_session, code_file):
    result = queries.diff_branches(db_session, code_file.id)
    assert result.base_hash is None
    assert "+// empty" in result.diff


def test_parse_branch():
    assert parse_branch("drafts") is Branch.DRAFTS
    assert parse_branch(Branch.MAIN) is Branch.MAIN
    assert parse_branch(None) is Branch.MAIN
    assert parse_branch("", default=Branch.DRAFTS) is Branch.DRAFTS
    with pytest.raises(ClientError):
        parse_branch("Main")
