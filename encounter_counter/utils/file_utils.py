"""File operations used by the state store and debug output."""

import os
import logging
import tempfile

logger = logging.getLogger(__name__)


class FileUtils:
    """File operations and utilities."""

    @staticmethod
    def ensure_directory_exists(dirpath: str) -> bool:
        """Create directory if it doesn't exist."""
        try:
            if dirpath and not os.path.exists(dirpath):
                os.makedirs(dirpath, exist_ok=True)
                logger.debug(f"Created directory: {dirpath}")
            return True

        except Exception as e:
            logger.error(f"Failed to create directory {dirpath}: {e}")
            return False

    @staticmethod
    def read_text(filepath: str) -> str:
        """Read a UTF-8 text file. Raises OSError on failure."""
        with open(filepath, "r", encoding="utf-8") as f:
            return f.read()

    @staticmethod
    def write_text_atomic(text: str, filepath: str) -> None:
        """Write text so readers see either the old file or the complete new one.

        The content goes to a temporary file in the target directory which is
        then renamed over the destination. Raises OSError on failure.
        """
        dir_path = os.path.dirname(os.path.abspath(filepath))
        os.makedirs(dir_path, exist_ok=True)

        fd, tmp_path = tempfile.mkstemp(prefix=".tmp_", suffix=".json", dir=dir_path)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(text)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, filepath)
        except BaseException:
            try:
                os.remove(tmp_path)
            except OSError:
                pass
            raise

        logger.debug(f"Wrote {len(text)} bytes to {filepath}")
