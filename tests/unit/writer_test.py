"""Unit tests for the output writer."""

from pathlib import Path

from rust_diagnostics.core.reconcile import Reconciliation
from rust_diagnostics.core.transform import FileTransform, TransformPair
from rust_diagnostics.writer import OutputWriter


def test_write_annotated_mirrors_source_path(tmp_path: Path) -> None:
    writer = OutputWriter(tmp_path)

    target = writer.write_annotated("src/main.rs", b"fn main() {}")

    assert target == tmp_path / "diagnostics" / "src" / "main.rs"
    assert target.read_bytes() == b"fn main() {}"


def test_write_annotated_stays_inside_output_root(tmp_path: Path) -> None:
    writer = OutputWriter(tmp_path)

    target = writer.write_annotated("/home/me/.cargo/registry/../x.rs", b"")

    assert target.is_relative_to(tmp_path / "diagnostics")


def test_write_transform_writes_pairs(tmp_path: Path) -> None:
    transform = FileTransform(
        path="src/main.rs",
        rule_id="clippy::unwrap_used",
        reconciliation=Reconciliation(),
        pairs=[TransformPair(0, b"before", b"after"), TransformPair(50, b"b2", b"a2")],
    )

    written = OutputWriter(tmp_path).write_transform(transform)

    base = tmp_path / "transform" / "unwrap_used" / "src" / "main"
    assert written == [base / "0.2.rs", base / "0.3.rs", base / "50.2.rs", base / "50.3.rs"]
    assert (base / "0.2.rs").read_bytes() == b"before"
    assert (base / "0.3.rs").read_bytes() == b"after"


def test_write_transform_without_pairs_creates_nothing(tmp_path: Path) -> None:
    transform = FileTransform(path="src/main.rs", rule_id="clippy::unwrap_used", reconciliation=Reconciliation())

    assert OutputWriter(tmp_path).write_transform(transform) == []
    assert not (tmp_path / "transform").exists()


def test_clean_removes_only_generated_files(tmp_path: Path) -> None:
    writer = OutputWriter(tmp_path)
    writer.write_annotated("src/main.rs", b"x")
    pair_dir = tmp_path / "transform" / "unwrap_used" / "src" / "main"
    pair_dir.mkdir(parents=True)
    (pair_dir / "0.2.rs").write_text("a")
    (pair_dir / "0.3.rs").write_text("b")
    (pair_dir / "notes.txt").write_text("keep")
    source = tmp_path / "src" / "main.rs"
    source.parent.mkdir()
    source.write_text("fn main() {}")

    assert writer.clean() == 3
    assert not (tmp_path / "diagnostics" / "src" / "main.rs").exists()
    assert (pair_dir / "notes.txt").exists()
    assert source.exists()


def test_clean_without_previous_output(tmp_path: Path) -> None:
    assert OutputWriter(tmp_path).clean() == 0
