import shutil
import tempfile
import uuid
from pathlib import Path
from types import TracebackType

from sourcelens.ingestion.exceptions import WorkspaceError
from sourcelens.logging.logger import Log


class TemporaryWorkspace:
    """Request-scoped scratch directory ``<root>/sourcelens-<uuid>``.

    Created on ``__enter__`` and removed recursively on every exit path,
    including when the body raises.
    """

    PREFIX = "sourcelens-"

    def __init__(self, root: Path | None = None) -> None:
        self._root = root if root is not None else Path(tempfile.gettempdir())
        self._path: Path | None = None

    @property
    def path(self) -> Path:
        if self._path is None:
            raise WorkspaceError("Workspace is not active")
        return self._path

    def write(self, name: str, data: bytes) -> Path:
        """Store ``data`` as ``name`` inside the workspace and return its path."""
        target = self.path / name
        try:
            target.write_bytes(data)
        except OSError as exc:
            raise WorkspaceError(f"Failed to write {target}: {exc}") from exc
        return target

    def __enter__(self) -> "TemporaryWorkspace":
        path = self._root / f"{self.PREFIX}{uuid.uuid4()}"
        try:
            path.mkdir(parents=True)
        except OSError as exc:
            raise WorkspaceError(f"Failed to create workspace {path}: {exc}") from exc
        self._path = path
        Log.debug(f"Workspace created: {path}")
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        path, self._path = self._path, None
        if path is None:
            return
        try:
            shutil.rmtree(path)
            Log.debug(f"Workspace removed: {path}")
        except OSError as error:
            Log.error(f"Failed to remove workspace {path}: {error}")
