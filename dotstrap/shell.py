import os
import shutil
import subprocess


def find_shell(name: str) -> str | None:
    return shutil.which(name)


def current_shell() -> str:
    return os.environ.get('SHELL', '')


def is_default_shell(path: str) -> bool:
    return os.path.realpath(current_shell()) == os.path.realpath(path)


def change_shell(path: str) -> bool:
    """Change the login shell of the current user."""
    result = subprocess.run(['chsh', '-s', path])
    return result.returncode == 0
