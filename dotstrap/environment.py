import subprocess
from pathlib import Path

from dotstrap.output import info, warning

ARCH_RELEASE = Path('/etc/arch-release')


def is_arch() -> bool:
    return ARCH_RELEASE.exists()


def is_process_running(name: str) -> bool:
    """Check for a process with exactly this name."""
    result = subprocess.run(['pgrep', '-x', name], capture_output=True)
    return result.returncode == 0


def validate_environment(source: Path, settings_file: Path, config_items: list[Path]) -> set[str]:
    """Validate the environment. Returns steps that must be skipped.

    Raises FileNotFoundError if the dotfiles directory is missing.
    """
    info('Validating environment...')

    if not is_arch():
        warning('Not running on Arch Linux. Some features may not work.')

    if not source.is_dir():
        raise FileNotFoundError(f'Source directory {source} does not exist')

    disabled = set()

    if not settings_file.is_file():
        warning(f'{settings_file.name} not found. Firefox setup will be skipped.')
        disabled.add('firefox')

    if not config_items:
        warning('No config directories found. Config copying will be skipped.')
        disabled.add('configs')

    info('Environment validation completed')
    return disabled


def reboot() -> bool:
    result = subprocess.run(['sudo', 'reboot'])
    return result.returncode == 0
