"""
Shared test fixtures.
"""

from pathlib import Path

import pytest

from dotstrap import output


@pytest.fixture(autouse=True)
def quiet_output():
    """Reset module-level output state between tests."""
    yield
    output.stop_log()
    output.set_verbose(False)


@pytest.fixture
def home_dirs(tmp_path: Path, monkeypatch) -> Path:
    """Point log and backup locations at a temporary home."""
    home = tmp_path / 'home'
    home.mkdir()
    monkeypatch.setattr('dotstrap.cli.LOG_DIR', home / '.dotfiles_install_logs')
    monkeypatch.setattr('dotstrap.cli.BACKUP_ROOT', home / '.dotfiles_backups')
    return home


@pytest.fixture
def profile(tmp_path: Path) -> Path:
    """Create a Firefox profile root with one prefs.js."""
    root = tmp_path / 'firefox'
    prefs = root / 'abcd1234.default-release' / 'prefs.js'
    prefs.parent.mkdir(parents=True)
    prefs.write_text('user_pref("browser.startup.page", 1);\nuser_pref("general.smoothScroll", true);\n')
    return root
