import os
from typing import Dict, Optional

from .. import codec
from ..exceptions import CodecError, UnsupportedPathError
from ..values import Scalar


def _fsync_dir(p: str) -> None:
    try:
        dfd = os.open(os.path.dirname(p) or ".", os.O_RDONLY)
    except OSError:
        # not supported on every platform (Windows)
        return
    try:
        os.fsync(dfd)
    except OSError:
        pass
    finally:
        os.close(dfd)


def validate_and_prepare(path: str) -> bool:
    """Create the directory tree and the file if missing.

    Returns True when the file already had content, False when it was just
    created or is empty. Filesystem errors propagate unchanged.
    """
    directory, filename = os.path.split(path)
    if not directory or not filename:
        raise UnsupportedPathError(
            f"Can't determine a file/directory distinction in the path [{path}]."
        )
    os.makedirs(directory, exist_ok=True)
    # "a+" opens or creates without truncating
    with open(path, "a+", encoding="utf-8") as f:
        f.seek(0, os.SEEK_END)
        return f.tell() != 0


def flush(path: str, data: Dict[str, Scalar], indent: Optional[int] = None) -> None:
    """Overwrite the file with the full mapping.

    Pattern: write .tmp -> fsync -> rename over target -> fsync dir.
    """
    content = codec.encode(data, indent=indent)
    tmp = path + ".tmp"
    try:
        with open(tmp, "w", encoding="utf-8") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp, path)
    except OSError:
        if os.path.exists(tmp):
            try:
                os.remove(tmp)
            except OSError:
                pass
        raise
    _fsync_dir(path)


def load(path: str) -> Dict[str, Scalar]:
    """Read and decode the whole file. Raises CodecError on malformed content."""
    with open(path, "rb") as f:
        raw = f.read()
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise CodecError(f"File is not valid UTF-8: {exc}") from exc
    return codec.decode(text)
