"""Tests for changeset descriptors and target preparation."""

from __future__ import annotations

from corroborate.model import ChangedFile, Changeset
from corroborate.scanner.pipeline.changeset import (
    AnalysisTarget,
    extract_added_code,
    is_dependency_manifest,
    prepare_files,
)

PATCH = "@@ -1,2 +1,3 @@\n+++ b/app.js\n-const a = 1;\n+const a = eval(input);\n context\n+run(a);"


def test_extract_added_code_keeps_only_added_lines() -> None:
    assert extract_added_code(PATCH) == "const a = eval(input);\nrun(a);"
    assert extract_added_code(None) == ""


def test_is_dependency_manifest() -> None:
    assert is_dependency_manifest("package.json")
    assert is_dependency_manifest("services/api/requirements.txt")
    assert not is_dependency_manifest("src/app.js")
    assert not is_dependency_manifest(None)


def test_prepare_files_selects_text_per_file() -> None:
    changeset = Changeset(
        files=(
            ChangedFile(filename="old.js", status="removed", patch=PATCH),
            ChangedFile(filename="package.json", patch="+x", content='{"dependencies": {}}'),
            ChangedFile(filename="app.js", patch=PATCH, content="full content"),
            ChangedFile(filename="new.js", status="added", content="console.log(1);"),
            ChangedFile(filename="cleanup.js", patch="-gone();\n context"),
        )
    )

    assert prepare_files(changeset) == [
        AnalysisTarget(file_path="package.json", code='{"dependencies": {}}'),
        AnalysisTarget(file_path="app.js", code="const a = eval(input);\nrun(a);"),
        AnalysisTarget(file_path="new.js", code="console.log(1);"),
    ]


def test_changeset_from_dict() -> None:
    changeset = Changeset.from_dict(
        {
            "title": "Add login",
            "author": {"login": "octocat"},
            "stats": {"additions": 10, "deletions": 2},
            "files": [{"path": "a.js", "status": "added", "additions": 10}, "junk"],
        }
    )

    assert changeset.title == "Add login"
    assert changeset.author == "octocat"
    assert (changeset.additions, changeset.deletions) == (10, 2)
    assert changeset.files == (ChangedFile(filename="a.js", status="added", additions=10),)


def test_changeset_from_dict_tolerates_missing_fields() -> None:
    changeset = Changeset.from_dict({"author": "dev", "stats": "n/a"})

    assert changeset == Changeset(author="dev")
