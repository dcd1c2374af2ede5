"""
Per-run scratch directory.
"""

from __future__ import annotations

import logging
import shutil
import tempfile
import time
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from videodigest.exceptions import WorkspaceError

logger = logging.getLogger(__name__)

WORKSPACE_PREFIX = "video-processing-"
DEFAULT_INPUT_SUFFIX = ".mp4"


@contextmanager
def scoped_workspace(
    prefix: str = WORKSPACE_PREFIX,
    base_dir: Path | None = None,
) -> Iterator[Path]:
    """Create a private temporary directory and remove it on exit.

    The directory and everything written into it is deleted however the
    block exits, including when an exception propagates.

    Args:
        prefix: Directory name prefix
        base_dir: Parent directory (default: the system temp dir)

    Yields:
        Path to the new, empty directory

    Raises:
        WorkspaceError: If the directory cannot be created
    """
    try:
        workspace = Path(tempfile.mkdtemp(prefix=prefix, dir=base_dir))
    except OSError as e:
        raise WorkspaceError(f"Could not create workspace: {e}") from e

    logger.debug(f"Created workspace {workspace}")
    try:
        yield workspace
    finally:
        try:
            shutil.rmtree(workspace)
            logger.debug(f"Removed workspace {workspace}")
        except OSError as e:
            logger.warning(f"Failed to clean up workspace {workspace}: {e}")


def write_input(workspace: Path, data: bytes, filename: str) -> Path:
    """Write the uploaded bytes into the workspace.

    The stored name keeps the original extension so the decoder can use it
    as a container hint; the rest of the name is generated.
    """
    suffix = Path(filename).suffix.lower() or DEFAULT_INPUT_SUFFIX
    input_path = workspace / f"input_{int(time.time() * 1000)}{suffix}"
    input_path.write_bytes(data)
    return input_path
