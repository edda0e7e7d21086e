import shutil
import subprocess


def has_pacman() -> bool:
    return shutil.which('pacman') is not None


def missing_packages(packages: list[str]) -> list[str]:
    """Get packages from the list that are not installed yet."""
    if not packages:
        return []
    result = subprocess.run(
        ['pacman', '-Qq'] + packages,
        capture_output=True,
        text=True,
    )
    installed = set(result.stdout.split())
    return [p for p in packages if p not in installed]


def install_packages(packages: list[str]) -> bool:
    """Upgrade the system and install packages."""
    if not packages:
        return True
    result = subprocess.run(['sudo', 'pacman', '-Syu', '--noconfirm', '--needed'] + packages)
    return result.returncode == 0
