import os
import shutil
import subprocess
import tempfile
import time
from pathlib import Path

from dotstrap.backup import BackupDir
from dotstrap.constants import PREFS_ENCODING
from dotstrap.environment import is_process_running
from dotstrap.output import info, error, debug, removed
from dotstrap.prefs import collect_keys, merge_prefs


def find_prefs_files(profile_root: Path) -> list[Path]:
    """Find prefs.js files under the Firefox profile root.

    Raises FileNotFoundError if the root or any prefs.js is missing.
    """
    if not profile_root.is_dir():
        raise FileNotFoundError(f'Firefox profile directory not found: {profile_root}')

    found = sorted(p for p in profile_root.rglob('prefs.js') if p.is_file())
    if not found:
        raise FileNotFoundError(f'No prefs.js files found in {profile_root}')
    return found


def is_firefox_running() -> bool:
    return is_process_running('firefox')


def close_firefox(wait: float = 2.0):
    """Ask every firefox process to quit and give it a moment to flush prefs."""
    subprocess.run(['killall', 'firefox'], capture_output=True)
    time.sleep(wait)


def read_prefs(path: Path) -> str:
    """Read a preference file as-is. Undecodable bytes survive a later write."""
    with open(path, encoding=PREFS_ENCODING, errors='surrogateescape', newline='') as f:
        return f.read()


def encode_prefs(content: str) -> bytes:
    return content.encode(PREFS_ENCODING, errors='surrogateescape')


def write_atomic(path: Path, content: str):
    """Replace path with content via a temp file in the same directory."""
    fd, tmp = tempfile.mkstemp(dir=path.parent, prefix=f'.{path.name}.', suffix='.tmp')
    try:
        with os.fdopen(fd, 'wb') as f:
            f.write(encode_prefs(content))
            f.flush()
            os.fsync(f.fileno())
        shutil.copymode(path, tmp)
        os.replace(tmp, path)
    except BaseException:
        if os.path.exists(tmp):
            os.unlink(tmp)
        raise


def apply_prefs(
    prefs_file: Path,
    settings_file: Path,
    backups: BackupDir | None,
    dry_run: bool = False,
) -> bool:
    """Merge settings_file into prefs_file. Returns True if successful.

    Order is read, back up, merge, replace. Nothing is written unless the
    backup succeeded.
    """
    try:
        existing = read_prefs(prefs_file)
        new = read_prefs(settings_file)
    except OSError as e:
        error(f'Failed to read preferences: {e}')
        return False

    overridden = collect_keys(new) & collect_keys(existing)

    if dry_run:
        for key in sorted(overridden):
            removed(key)
        info(f'Would merge {settings_file.name} into {prefs_file} ({len(overridden)} overridden)')
        return True

    try:
        if backups is not None:
            backups.backup(prefs_file)
        write_atomic(prefs_file, merge_prefs(existing, new))
        for key in sorted(overridden):
            debug(f'Removed duplicate preference: {key}')
    except OSError as e:
        error(f'Failed to write {prefs_file}: {e}')
        return False

    return True
