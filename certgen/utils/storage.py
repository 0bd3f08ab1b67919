import os
import tempfile


def ensure_dir(path: str) -> None:
    """Create directory if missing (mkdir -p equivalent)."""
    if path:
        os.makedirs(path, exist_ok=True)


def write_atomic(path: str, data: bytes) -> None:
    """Write the document to a temporary file then atomically rename it into place."""
    dir_path = os.path.dirname(path) or "."
    ensure_dir(dir_path)
    fd, tmp_path = tempfile.mkstemp(dir=dir_path, suffix=".pdf.part")
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        os.replace(tmp_path, path)
    finally:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
