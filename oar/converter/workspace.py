"""Scoped working directory for the temporary artifact."""

import logging
import shutil
from pathlib import Path

from oar.utils.errors import ConfigError, FileAccessError, OutputMoveError

logger = logging.getLogger(__name__)


class Workspace:
    """
    Hidden working directory holding the single reused artifact.

    Created on enter and removed on exit, whether the body succeeded or
    raised. Removal is best-effort. An existing directory is only taken
    over when it holds nothing but stale artifacts (``tmp.*`` files).
    """

    def __init__(self, root: Path, suffix: str = ".ogg"):
        self.root = Path(root)
        self.artifact_path = self.root / f"tmp{suffix}"

    def __enter__(self) -> "Workspace":
        if self.root.is_dir():
            foreign = [p for p in self.root.iterdir() if not self._is_stale_artifact(p)]
            if foreign:
                raise ConfigError(
                    f"Working directory '{self.root}' is not empty "
                    f"(found '{foreign[0].name}'); refusing to use it"
                )
        try:
            self.root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FileAccessError(f"Error creating directory '{self.root}'") from e
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.clear()

    @staticmethod
    def _is_stale_artifact(path: Path) -> bool:
        return path.is_file() and path.stem == "tmp"

    def contains(self, path: Path) -> bool:
        """Whether ``path`` lies inside the working directory."""
        return Path(path).resolve().is_relative_to(self.root.resolve())

    def clear(self) -> None:
        shutil.rmtree(self.root, ignore_errors=True)

    def promote(self, output_path: Path) -> Path:
        """
        Move the artifact to ``output_path``, replacing any existing file.

        Raises:
            OutputMoveError: If the move fails
        """
        output_path = Path(output_path)
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            shutil.move(str(self.artifact_path), str(output_path))
        except OSError as e:
            raise OutputMoveError(
                f"Error moving output file '{self.artifact_path}' to '{output_path}'"
            ) from e

        logger.info("Moved '%s' to '%s'", self.artifact_path, output_path)
        return output_path
