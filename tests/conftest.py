"""Shared test fixtures for mdbake."""

import os
from pathlib import Path

import pytest

from mdbake.config.models import MdBakeConfig

# 1x1 transparent PNG
PNG_BYTES = bytes.fromhex(
    "89504e470d0a1a0a0000000d4948445200000001000000010806000000"
    "1f15c4890000000d49444154789c6360000002000001e221bc330000000049454e44ae426082"
)


def set_mtime(path: Path, ns: int) -> None:
    """Pin both atime and mtime of *path* to *ns* nanoseconds."""
    os.utime(path, ns=(ns, ns))


@pytest.fixture
def sample_config():
    return MdBakeConfig()


@pytest.fixture
def lenient_config():
    return MdBakeConfig(processing={"strict": False})


@pytest.fixture
def png_bytes():
    return PNG_BYTES


@pytest.fixture
def cluster(tmp_path):
    """A small cluster: two top-level docs, one nested doc with an image."""
    root = tmp_path / "cluster"
    (root / "guide").mkdir(parents=True)
    (root / "index.md").write_text("# Home\n\nWelcome.\n")
    (root / "notes.md").write_text("- one\n- two\n")
    (root / "guide" / "setup.md").write_text("## Setup\n\n![diagram](diagram.png)\n")
    (root / "guide" / "diagram.png").write_bytes(PNG_BYTES)
    (root / "readme.txt").write_text("not markdown")
    return root


@pytest.fixture(autouse=True)
def _reset_mdbake_logger():
    """CLI runs install a non-propagating handler; undo it so caplog keeps working."""
    import logging

    yield
    logger = logging.getLogger("mdbake")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
