import shutil
import subprocess
import tempfile
from pathlib import Path

from dotstrap.output import info, success, error


SUPPORTED_HELPERS = ['yay', 'paru']
AUR_URL = 'https://aur.archlinux.org/{}.git'
BUILD_DEPS = ['git', 'base-devel']


def get_available_aur_helper() -> str | None:
    """Get first available AUR helper, or None."""
    for helper in SUPPORTED_HELPERS:
        if shutil.which(helper):
            return helper
    return None


def _run(cmd: list[str], failure: str, cwd: Path | None = None) -> bool:
    if subprocess.run(cmd, cwd=cwd).returncode != 0:
        error(failure)
        return False
    return True


def bootstrap_aur_helper(helper: str = 'yay') -> bool:
    """Build and install an AUR helper with makepkg.

    The clone lives in a temporary directory that is removed afterwards,
    whether or not the build succeeded.
    """
    if helper not in SUPPORTED_HELPERS:
        error(f'Unsupported AUR helper: {helper}. Supported: {", ".join(SUPPORTED_HELPERS)}')
        return False

    info(f'Installing build dependencies for {helper}...')
    if not _run(['sudo', 'pacman', '-S', '--noconfirm', '--needed'] + BUILD_DEPS, 'Failed to install git and base-devel'):
        return False

    with tempfile.TemporaryDirectory(prefix=f'{helper}-install-') as tmpdir:
        build_dir = Path(tmpdir) / helper

        info(f'Cloning {helper} repository...')
        if not _run(['git', 'clone', '--depth=1', AUR_URL.format(helper), str(build_dir)], f'Failed to clone {helper} repository'):
            return False

        info(f'Building and installing {helper}...')
        if not _run(['makepkg', '-si', '--noconfirm'], f'Failed to build/install {helper}', cwd=build_dir):
            return False

    if shutil.which(helper) is None:
        error(f'{helper} installation verification failed')
        return False

    success(f'{helper} installed successfully')
    return True
