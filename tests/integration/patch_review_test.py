"""End-to-end patch correlation against a real git repository."""

from pathlib import Path
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from rust_diagnostics.cli.app import app
from rust_diagnostics.core.review import run_patch_review
from rust_diagnostics.tools.git import GitRepository
from tests.helpers import UNWRAP_SOURCE, FakeClippy, requires_git, run_git

pytestmark = requires_git

FIXED = """
fn main() {
    if let Ok(s) = std::fs::read_to_string("Cargo.toml") {
        println!("{s}");
    }
}
"""

UNFIXED = """
fn main() {
    let s = std::fs::read_to_string("Cargo.toml").unwrap();
    println!("The configuration file is: {s}");
}
"""


def _setup(repo: Path, update: str) -> tuple[str, str]:
    """Commit the unwrap version, then *update*, and check out the first commit again."""
    run_git(["init", "-b", "main"], repo)
    main = repo / "src" / "main.rs"
    main.parent.mkdir(parents=True)
    main.write_text(UNWRAP_SOURCE, encoding="utf-8")
    run_git(["add", "src/main.rs"], repo)
    run_git(["commit", "-m", "init"], repo)
    init_commit = run_git(["rev-parse", "HEAD"], repo)
    main.write_text(update, encoding="utf-8")
    run_git(["commit", "-am", "update"], repo)
    update_commit = run_git(["rev-parse", "HEAD"], repo)
    run_git(["checkout", "--quiet", init_commit], repo)
    return init_commit, update_commit


def test_fixing_patch_is_confirmed(tmp_path: Path) -> None:
    init_commit, update_commit = _setup(tmp_path, FIXED)
    clippy = FakeClippy(tmp_path)
    repository = GitRepository(tmp_path)

    review = run_patch_review(
        repository, clippy, update_commit, ["unwrap_used"], clippy.diagnose(["unwrap_used"]), confirm_fixes=True
    )

    assert review.confirmed
    assert [s.rule_id for s in review.resolved["src/main.rs"]] == ["clippy::unwrap_used"]
    assert review.report == (
        "#[Warning(clippy::unwrap_used)\n"
        "@@ -1,5 +1,6 @@\n"
        " \n"
        " fn main() {\n"
        '-    let s = std::fs::read_to_string("Cargo.toml").unwrap();\n'
        '-    println!("{s}");\n'
        '+    if let Ok(s) = std::fs::read_to_string("Cargo.toml") {\n'
        '+        println!("{s}");\n'
        "+    }\n"
        " }\n"
    )
    assert repository.head() == init_commit
    assert (tmp_path / "src" / "main.rs").read_text(encoding="utf-8") == UNWRAP_SOURCE


def test_rewording_patch_is_not_confirmed(tmp_path: Path) -> None:
    init_commit, update_commit = _setup(tmp_path, UNFIXED)
    clippy = FakeClippy(tmp_path)
    repository = GitRepository(tmp_path)

    review = run_patch_review(
        repository, clippy, update_commit, ["unwrap_used"], clippy.diagnose(["unwrap_used"]), confirm_fixes=True
    )

    assert list(review.touched) == ["src/main.rs"]
    assert review.touched_count == 1
    assert review.resolved == {}
    assert review.report == ""
    assert repository.head() == init_commit


def test_without_confirmation_touched_spans_are_reported(tmp_path: Path) -> None:
    _, update_commit = _setup(tmp_path, UNFIXED)
    clippy = FakeClippy(tmp_path)

    review = run_patch_review(
        GitRepository(tmp_path), clippy, update_commit, ["unwrap_used"], clippy.diagnose(["unwrap_used"])
    )

    assert not review.confirmed
    assert review.report.startswith("#[Warning(clippy::unwrap_used)\n@@ -1,5 +1,5 @@\n")
    assert len(clippy.diagnose_calls) == 1


@pytest.mark.parametrize(("update", "confirmed"), [(FIXED, True), (UNFIXED, False)], ids=["fixed", "unfixed"])
def test_patch_command(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, update: str, confirmed: bool) -> None:
    _, update_commit = _setup(tmp_path, update)
    monkeypatch.setenv("RUST_DIAGNOSTICS_WORKDIR", str(tmp_path))
    clippy = FakeClippy(tmp_path)

    with patch("rust_diagnostics.cli.patch.get_analyzer", return_value=clippy):
        result = CliRunner().invoke(app, ["patch", update_commit, "--confirm", "-f", "unwrap_used"])

    assert result.exit_code == 0, result.output
    assert result.output.startswith("There are 1 warnings in 1 files.\n")
    assert ("#[Warning(clippy::unwrap_used)" in result.output) is confirmed
    fixes = 1 if confirmed else 0
    assert f"The patch fixes {fixes} of 1 touched warnings in {fixes} files." in result.output
