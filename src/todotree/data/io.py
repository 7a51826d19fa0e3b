import os
import stat
import tempfile
from pathlib import Path
from typing import Union
from todotree.recovery import TodoIOError
from todotree.logs import get_logger

log = get_logger("io")

def _cleanup(temp_path):
    if temp_path is not None and os.path.exists(temp_path):
        try:
            os.unlink(temp_path)
            log.debug(f"Cleaned up temporary file: {temp_path}")
        except OSError as cleanup_error:
            log.warning(f"Could not clean up temp file {temp_path}: {cleanup_error}")

def _target_mode(file_path : Path) -> int:
    """Permission bits of an existing target, else what open() would create."""
    try:
        return stat.S_IMODE(os.stat(file_path).st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask

def read_text(file_path : Union[Path, str]) -> str:
    """Read a UTF-8 text file, raising TodoIOError on any I/O failure."""
    file_path = Path(file_path)
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        error_msg = f"Failed to read file {file_path}: {e}"
        log.error(error_msg)
        raise TodoIOError(error_msg) from e

def write_text(file_path : Union[Path, str], content : str, atomic : bool = True):
    """
    Write ``content`` to ``file_path``, replacing whatever was there.

    With ``atomic`` the data goes to a temporary file in the same directory
    which is then renamed over the target.
    """
    file_path = Path(file_path)

    if not atomic:
        try:
            with open(file_path, 'w', encoding='utf-8', newline='\n') as f:
                f.write(content)
        except OSError as e:
            error_msg = f"I/O error saving file {file_path}: {e}"
            log.error(error_msg)
            raise TodoIOError(error_msg) from e
        log.debug(f"Saved file: {file_path}")
        return

    temp_path = None
    try:
        with tempfile.NamedTemporaryFile(mode='w', encoding='utf-8', newline='\n', dir=file_path.parent, prefix=f".{file_path.name}.", suffix='.tmp', delete=False) as temp_file:
            temp_path = temp_file.name
            temp_file.write(content)
            temp_file.flush()
            os.fsync(temp_file.fileno())

        # NamedTemporaryFile is 0600; give the result the mode the target had
        os.chmod(temp_path, _target_mode(file_path))

        # Atomic replace - this either completely succeeds or completely fails
        os.replace(temp_path, file_path)
        log.debug(f"Successfully saved file: {file_path}")

    except OSError as e:
        _cleanup(temp_path)
        error_msg = f"I/O error saving file {file_path}: {e}"
        log.error(error_msg)
        raise TodoIOError(error_msg) from e
