import os
import shutil
import time
from datetime import datetime
from pathlib import Path

from dotstrap.constants import TIMESTAMP_FORMAT
from dotstrap.output import debug, info


def fsync_tree(path: Path):
    """Flush a copied file, or every file and directory under a copied tree, to disk."""
    if path.is_symlink():
        paths = []
    elif path.is_dir():
        paths = [path] + [p for p in path.rglob('*') if not p.is_symlink()]
    else:
        paths = [path]
    paths.append(path.parent)

    for p in paths:
        fd = os.open(p, os.O_RDONLY)
        try:
            os.fsync(fd)
        finally:
            os.close(fd)


class BackupDir:
    """Timestamped backup directory, created on first use."""

    def __init__(self, root: Path, now: datetime | None = None):
        now = now or datetime.now()
        self.path = root / now.strftime(TIMESTAMP_FORMAT)
        self.used = False

    def target_for(self, path: Path) -> Path:
        return self.path / f'{path.name}.{int(time.time())}'

    def backup(self, path: Path, dry_run: bool = False) -> Path | None:
        """Copy path (file or directory) into the backup directory.

        Returns the backup location, or None if there was nothing to back up.
        Copy errors propagate so callers never overwrite an unsaved original.
        """
        if not path.exists() and not path.is_symlink():
            return None

        target = self.target_for(path)

        if dry_run:
            debug(f'Would back up {path} to {target}')
            return target

        self.path.mkdir(parents=True, exist_ok=True)
        if path.is_dir() and not path.is_symlink():
            shutil.copytree(path, target, symlinks=True)
        else:
            shutil.copy2(path, target, follow_symlinks=False)
        fsync_tree(target)

        self.used = True
        info(f'Backed up: {path} -> {target}')
        return target
