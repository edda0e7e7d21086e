import shutil
from datetime import datetime
from pathlib import Path

import typer

from dotstrap import __version__
from dotstrap.backup import BackupDir
from dotstrap.bootstrap import bootstrap_aur_helper, get_available_aur_helper
from dotstrap.config import (
    config_path,
    default_config,
    get_aur_helper,
    get_config_pattern,
    get_firefox_settings,
    get_packages,
    get_profile_dir,
    get_shell,
    get_target_dir,
    load_config,
    save_yaml,
)
from dotstrap.constants import BACKUP_ROOT, FIREFOX_PROFILE_DIR, LOG_DIR, TIMESTAMP_FORMAT
from dotstrap.dotfiles import copy_configs, find_config_items
from dotstrap.environment import reboot, validate_environment
from dotstrap.firefox import (
    apply_prefs,
    close_firefox,
    encode_prefs,
    find_prefs_files,
    is_firefox_running,
    read_prefs,
)
from dotstrap.output import (
    added,
    debug,
    error,
    header,
    info,
    set_verbose,
    start_log,
    stop_log,
    success,
    warning,
)
from dotstrap.packages import has_pacman, install_packages, missing_packages
from dotstrap.plan import STEPS, resolve_steps
from dotstrap.prefs import merge_prefs
from dotstrap.shell import change_shell, find_shell, is_default_shell

app = typer.Typer(
    name='dotstrap',
    help='Dotfiles installer for Arch Linux',
    context_settings={
        'help_option_names': ['--help', '-h'],
    },
)


class Run:
    """Settings shared by the steps of one install run."""

    def __init__(self, source: Path, config: dict, dry_run: bool, yes: bool, backups: BackupDir):
        self.source = source
        self.config = config
        self.dry_run = dry_run
        self.yes = yes
        self.backups = backups

    def confirm(self, prompt: str, default: bool = True) -> bool:
        if self.dry_run:
            debug(f'Would ask: {prompt}')
            return True
        if self.yes:
            return True
        return typer.confirm(prompt, default=default)


def version_callback(value: bool):
    if value:
        typer.echo(f'dotstrap {__version__}')
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False, '--version', '-v', callback=version_callback, is_eager=True, help='Show version'
    ),
):
    """Dotfiles installer for Arch Linux."""
    pass


def load_config_or_exit(source: Path) -> dict:
    try:
        return load_config(source)
    except RuntimeError as e:
        error(str(e))
        raise typer.Exit(1)


def select_profile(prefs_files: list[Path], run: Run) -> Path:
    """Pick a profile. The first one wins unless the user chooses otherwise."""
    if len(prefs_files) == 1 or run.dry_run or run.yes:
        return prefs_files[0]

    warning('Multiple Firefox profiles found:')
    for i, path in enumerate(prefs_files):
        info(f'  [{i}] {path}')

    while True:
        choice = typer.prompt('Select profile', default=0, type=int)
        if 0 <= choice < len(prefs_files):
            return prefs_files[choice]
        error(f'Invalid choice "{choice}". Enter 0-{len(prefs_files) - 1}.')


def step_deps(run: Run) -> bool:
    info('Checking dependencies...')

    if not has_pacman():
        error('pacman not found. This step requires Arch Linux.')
        return False

    packages = get_packages(run.config)
    if not packages:
        info('No packages configured')
        return True

    if not run.confirm(f'Install recommended packages ({" ".join(packages)})?'):
        info('Package installation skipped by user')
        return True

    if run.dry_run:
        for pkg in missing_packages(packages):
            added(pkg)
        return True

    info('Installing packages...')
    if not install_packages(packages):
        error('Failed to install some packages')
        return False

    success('Packages installed successfully')
    return True


def step_yay(run: Run) -> bool:
    helper = get_aur_helper(run.config)
    info(f'Checking {helper} AUR helper...')

    if shutil.which(helper):
        info(f'{helper} is already installed')
        return True

    other = get_available_aur_helper()
    if other is not None:
        warning(f'"{other}" is installed, but "{helper}" is configured')

    if run.dry_run:
        info(f'Would bootstrap {helper}')
        return True

    return bootstrap_aur_helper(helper)


def step_firefox(run: Run) -> bool:
    info('Setting up Firefox preferences...')

    if is_firefox_running():
        warning('Firefox is currently running!')
        if not run.confirm('Firefox must be closed to apply settings. Close it now?'):
            warning('Firefox setup skipped - browser is running')
            return True
        if not run.dry_run:
            close_firefox()

    try:
        prefs_files = find_prefs_files(get_profile_dir(run.config))
    except FileNotFoundError as e:
        error(str(e))
        info('Please run Firefox at least once to create a profile')
        return False

    prefs_file = select_profile(prefs_files, run)
    info(f'Using profile: {prefs_file}')

    settings = get_firefox_settings(run.config, run.source)
    info('Merging preferences (avoiding duplicates)...')
    if not apply_prefs(prefs_file, settings, run.backups, run.dry_run):
        return False

    if not run.dry_run:
        success('Firefox preferences applied successfully')
    return True


def step_shell(run: Run) -> bool:
    name = get_shell(run.config)
    info('Checking default shell...')

    path = find_shell(name)
    if path is None:
        warning(f'{name} shell not found. Install it first.')
        return False

    if is_default_shell(path):
        info(f'{name} is already the default shell')
        return True

    if not run.confirm(f'Change default shell to {name}?'):
        info('Shell change skipped by user')
        return True

    if run.dry_run:
        info(f'Would change shell to {path}')
        return True

    if not change_shell(path):
        error('Failed to change default shell')
        return False

    success(f'Default shell changed to {name}')
    warning('Changes will take effect after logout/login')
    return True


def step_configs(run: Run) -> bool:
    info('Copying configuration files...')
    items = find_config_items(run.source, get_config_pattern(run.config))
    return copy_configs(items, get_target_dir(run.config), run.backups, run.dry_run)


def step_reboot(run: Run) -> bool:
    if run.dry_run:
        info('Reboot prompt skipped')
        return True

    if run.yes or not typer.confirm('Setup completed. Reboot now?', default=True):
        info('Reboot cancelled. Remember to reboot for all changes to take effect.')
        return True

    info('Rebooting system...')
    return reboot()


STEP_FUNCTIONS = {
    'deps': step_deps,
    'yay': step_yay,
    'firefox': step_firefox,
    'shell': step_shell,
    'configs': step_configs,
}


@app.command()
def install(
    source: Path = typer.Option(Path('.'), '--source', '-s', help='Dotfiles directory'),
    dry_run: bool = typer.Option(False, '--dry-run', '-n', help='Show what would be done'),
    verbose: bool = typer.Option(False, '--verbose', '-V', help='Enable verbose output'),
    yes: bool = typer.Option(False, '--yes', '-y', help='Skip confirmation prompts'),
    skip: list[str] = typer.Option(None, '--skip', help=f'Step to skip ({", ".join(STEPS)})'),
    only: list[str] = typer.Option(None, '--only', help='Run only this step (repeatable)'),
):
    """Install packages, Firefox preferences, shell and configs."""
    set_verbose(verbose)

    try:
        steps = resolve_steps(skip, only)
    except ValueError as e:
        error(str(e))
        raise typer.Exit(1)

    source = source.expanduser().resolve()
    now = datetime.now()
    log_file = LOG_DIR / f'install_{now.strftime(TIMESTAMP_FORMAT)}.log'
    start_log(log_file)

    try:
        header(f'Dotfiles Installer v{__version__}')
        if dry_run:
            info('DRY-RUN mode enabled')
        info(f'Source directory: {source}')

        config = load_config_or_exit(source)
        run = Run(source, config, dry_run, yes, BackupDir(BACKUP_ROOT, now))

        try:
            items = find_config_items(source, get_config_pattern(config))
            disabled = validate_environment(source, get_firefox_settings(config, source), items)
        except (FileNotFoundError, RuntimeError) as e:
            error(str(e))
            raise typer.Exit(1)

        info('Starting installation process...')

        for step in steps:
            if step == 'reboot':
                continue
            if step in disabled:
                info(f'Skipping {step}')
                continue
            header(f'Step: {step}')
            try:
                ok = STEP_FUNCTIONS[step](run)
            except RuntimeError as e:
                error(str(e))
                ok = False
            if not ok:
                error(f'Step failed: {step}')
                raise typer.Exit(1)

        if dry_run:
            warning('Dry run - no changes made')
        else:
            success('Installation completed successfully!')
        info(f'Log file: {log_file}')

        if run.backups.used:
            info(f'Backups saved to: {run.backups.path}')

        if 'reboot' in steps and not step_reboot(run):
            error('Reboot failed')
            raise typer.Exit(1)
    finally:
        stop_log()


@app.command('merge-prefs')
def merge_prefs_cmd(
    prefs: Path = typer.Argument(..., help='Existing prefs.js to merge into'),
    settings: Path = typer.Argument(..., help='Preference lines to apply'),
    stdout: bool = typer.Option(False, '--stdout', help='Print the merged result instead of writing'),
    no_backup: bool = typer.Option(False, '--no-backup', help='Do not back up prefs.js first'),
    dry_run: bool = typer.Option(False, '--dry-run', '-n', help='Show what would be done'),
):
    """Merge preference lines into a single prefs.js."""
    if stdout:
        try:
            merged = merge_prefs(read_prefs(prefs), read_prefs(settings))
        except OSError as e:
            error(f'Failed to read preferences: {e}')
            raise typer.Exit(1)
        typer.echo(encode_prefs(merged), nl=False)
        return

    backups = None if no_backup else BackupDir(BACKUP_ROOT)
    if not apply_prefs(prefs, settings, backups, dry_run):
        raise typer.Exit(1)

    if dry_run:
        warning('Dry run - no changes made')
    else:
        success(f'Merged {settings} into {prefs}')


@app.command()
def profiles(
    profile_dir: Path = typer.Option(FIREFOX_PROFILE_DIR, '--profile-dir', '-p', help='Firefox profile root'),
):
    """List Firefox profiles that have a prefs.js."""
    try:
        found = find_prefs_files(profile_dir.expanduser())
    except FileNotFoundError as e:
        error(str(e))
        raise typer.Exit(1)

    for i, path in enumerate(found):
        default = ' (default)' if i == 0 else ''
        info(f'[{i}] {path}{default}')


@app.command()
def init(
    source: Path = typer.Option(Path('.'), '--source', '-s', help='Dotfiles directory'),
):
    """Write a default dotstrap.yaml into the dotfiles directory."""
    path = config_path(source)
    if path.exists():
        info(f'Config already exists: {path}')
        return

    source.mkdir(parents=True, exist_ok=True)
    save_yaml(path, default_config())
    success(f'Created {path}')


def main():
    app()


if __name__ == '__main__':
    main()
