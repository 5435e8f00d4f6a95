import logging
from pathlib import Path, PurePosixPath

from rust_diagnostics.config import DIAGNOSTICS_DIR, TRANSFORM_DIR
from rust_diagnostics.core.transform import FileTransform

logger = logging.getLogger(__name__)

_GENERATED = ((DIAGNOSTICS_DIR, "*.rs"), (TRANSFORM_DIR, "*.2.rs"), (TRANSFORM_DIR, "*.3.rs"))


def _relative(path: str | PurePosixPath) -> PurePosixPath:
    pure = PurePosixPath(path)
    parts = [part for part in pure.parts if part not in ("/", "..")]
    return PurePosixPath(*parts)


class OutputWriter:
    """Owns every filesystem side effect of a run: the ``diagnostics/`` and ``transform/`` trees."""

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)

    @property
    def diagnostics_dir(self) -> Path:
        return self.root / DIAGNOSTICS_DIR

    @property
    def transform_dir(self) -> Path:
        return self.root / TRANSFORM_DIR

    def clean(self) -> int:
        """Delete files generated by a previous run and return how many were removed."""
        removed = 0
        for folder, pattern in _GENERATED:
            base = self.root / folder
            if not base.exists():
                continue
            for stale in base.rglob(pattern):
                if stale.is_file():
                    stale.unlink(missing_ok=True)
                    removed += 1
        if removed:
            logger.info("Removed %d previously generated file(s) under %s", removed, self.root)
        return removed

    def write_annotated(self, source_path: str, content: bytes) -> Path:
        target = self.diagnostics_dir / _relative(source_path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(content)
        return target

    def write_transform(self, transform: FileTransform) -> list[Path]:
        written: list[Path] = []
        for pair in transform.pairs:
            before_name, after_name = transform.pair_paths(pair)
            before_path = self.transform_dir / _relative(before_name)
            after_path = self.transform_dir / _relative(after_name)
            before_path.parent.mkdir(parents=True, exist_ok=True)
            before_path.write_bytes(pair.before)
            after_path.write_bytes(pair.after)
            written.extend([before_path, after_path])
        return written
