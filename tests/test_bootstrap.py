"""
Tests for building the AUR helper.
"""

from pathlib import Path

import pytest

from dotstrap import bootstrap
from dotstrap.bootstrap import bootstrap_aur_helper


class FakeRun:
    def __init__(self, fail_on: str | None = None):
        self.calls = []
        self.fail_on = fail_on

    def __call__(self, cmd, cwd=None):
        self.calls.append((cmd, cwd))
        code = 1 if self.fail_on in cmd else 0
        return type('Result', (), {'returncode': code})()


@pytest.fixture
def which(monkeypatch):
    installed = set()
    monkeypatch.setattr(bootstrap.shutil, 'which', lambda name: f'/usr/bin/{name}' if name in installed else None)
    return installed


def test_unsupported_helper():
    assert not bootstrap_aur_helper('trizen')


def test_builds_in_temp_dir(monkeypatch, which):
    run = FakeRun()

    def fake_run(cmd, cwd=None):
        if cmd[0] == 'makepkg':
            which.add('yay')
        return run(cmd, cwd)

    monkeypatch.setattr(bootstrap.subprocess, 'run', fake_run)

    assert bootstrap_aur_helper('yay')

    commands = [cmd[0] if cmd[0] != 'sudo' else cmd[1] for cmd, _ in run.calls]
    assert commands == ['pacman', 'git', 'makepkg']
    clone_cmd = run.calls[1][0]
    assert clone_cmd[-2] == 'https://aur.archlinux.org/yay.git'
    build_dir = run.calls[2][1]
    assert build_dir == Path(clone_cmd[-1])
    assert not build_dir.parent.exists()


def test_clone_failure_stops(monkeypatch, which):
    run = FakeRun(fail_on='clone')
    monkeypatch.setattr(bootstrap.subprocess, 'run', run)

    assert not bootstrap_aur_helper('yay')
    assert len(run.calls) == 2


def test_verification_failure(monkeypatch, which):
    monkeypatch.setattr(bootstrap.subprocess, 'run', FakeRun())
    assert not bootstrap_aur_helper('yay')
