import shutil
from pathlib import Path

from dotstrap.backup import BackupDir
from dotstrap.output import info, warning, error, added, debug


def find_config_items(source: Path, pattern: str = 'config*') -> list[Path]:
    """Get top-level files and directories in source matching pattern."""
    if not source.is_dir():
        return []
    return sorted(p for p in source.glob(pattern) if p.name != '.git')


def copy_item(item: Path, target: Path):
    if item.is_dir():
        shutil.copytree(item, target, symlinks=True, dirs_exist_ok=True)
    else:
        target.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(item, target)


def copy_configs(
    items: list[Path],
    target_dir: Path,
    backups: BackupDir | None,
    dry_run: bool = False,
) -> bool:
    """Copy config items into target_dir. Returns True if all copies succeeded."""
    if not items:
        warning('No config files/directories found')
        return True

    info(f'Found {len(items)} config item(s) to copy')

    if not dry_run:
        target_dir.mkdir(parents=True, exist_ok=True)

    failed = []
    for item in items:
        target = target_dir / item.name

        if dry_run:
            if backups is not None:
                backups.backup(target, dry_run=True)
            debug(f'Would copy {item} -> {target}')
            added(f'{item.name} -> {target}')
            continue

        try:
            if backups is not None:
                backups.backup(target)
            copy_item(item, target)
        except OSError as e:
            error(f'Failed to copy: {item.name} ({e})')
            failed.append(item.name)
            continue

        added(f'{item.name} -> {target}')

    if failed:
        return False

    info(f'Configuration files copied to {target_dir}')
    return True
