import yaml
from pathlib import Path

from dotstrap.constants import (
    CONFIG_FILE_NAME,
    CONFIG_PATTERN,
    DEFAULT_AUR_HELPER,
    DEFAULT_PACKAGES,
    DEFAULT_SHELL,
    FIREFOX_PROFILE_DIR,
    FIREFOX_SETTINGS,
    TARGET_DIR,
)


def config_path(source: Path) -> Path:
    return source / CONFIG_FILE_NAME


def load_config(source: Path) -> dict:
    """Load dotstrap.yaml from the dotfiles directory, if present."""
    path = config_path(source)
    if not path.exists():
        return {}
    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise RuntimeError(f'Invalid config {path}: {e}') from e
    if not isinstance(data, dict):
        raise RuntimeError(f'Invalid config {path}: expected a mapping')
    return data


def _section(config: dict, name: str) -> dict:
    section = config.get(name) or {}
    if not isinstance(section, dict):
        raise RuntimeError(f"Config section '{name}' must be a mapping")
    return section


def get_packages(config: dict) -> list[str]:
    """Get packages to install, de-duplicated in declaration order."""
    packages = config.get('packages', DEFAULT_PACKAGES)
    if not isinstance(packages, list) or not all(isinstance(p, str) for p in packages):
        raise RuntimeError("Config key 'packages' must be a list of package names")
    seen = set()
    unique = []
    for p in packages:
        if p not in seen:
            seen.add(p)
            unique.append(p)
    return unique


def get_aur_helper(config: dict) -> str:
    return config.get('aur_helper', DEFAULT_AUR_HELPER)


def get_shell(config: dict) -> str:
    return config.get('shell', DEFAULT_SHELL)


def get_firefox_settings(config: dict, source: Path) -> Path:
    """Get the bundled preferences file, relative to the dotfiles directory."""
    name = _section(config, 'firefox').get('settings', FIREFOX_SETTINGS)
    return source / Path(name).expanduser()


def get_profile_dir(config: dict) -> Path:
    profile_dir = _section(config, 'firefox').get('profile_dir')
    if profile_dir is None:
        return FIREFOX_PROFILE_DIR
    return Path(profile_dir).expanduser()


def get_config_pattern(config: dict) -> str:
    return _section(config, 'configs').get('pattern', CONFIG_PATTERN)


def get_target_dir(config: dict) -> Path:
    target = _section(config, 'configs').get('target')
    if target is None:
        return TARGET_DIR
    return Path(target).expanduser()


def default_config() -> dict:
    return {
        'packages': list(DEFAULT_PACKAGES),
        'aur_helper': DEFAULT_AUR_HELPER,
        'shell': DEFAULT_SHELL,
        'firefox': {
            'settings': FIREFOX_SETTINGS,
        },
        'configs': {
            'pattern': CONFIG_PATTERN,
        },
    }


def save_yaml(path: Path, data: dict):
    """Save YAML consistently."""
    with open(path, 'w') as f:
        yaml.safe_dump(data, f, sort_keys=False, default_flow_style=False)
