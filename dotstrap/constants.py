from pathlib import Path

CONFIG_FILE_NAME = 'dotstrap.yaml'
TARGET_DIR = Path.home() / '.config'
LOG_DIR = Path.home() / '.dotfiles_install_logs'
BACKUP_ROOT = Path.home() / '.dotfiles_backups'
FIREFOX_PROFILE_DIR = Path.home() / '.mozilla' / 'firefox'

FIREFOX_SETTINGS = 'firefox.txt'
PREFS_ENCODING = 'utf-8'
CONFIG_PATTERN = 'config*'
DEFAULT_SHELL = 'fish'
DEFAULT_AUR_HELPER = 'yay'

DEFAULT_PACKAGES = [
    'git',
    'firefox',
    'chromium',
    'telegram-desktop',
    'fish',
    'waybar',
    'docker',
    'docker-compose',
    'fastfetch',
    'brightnessctl',
    'power-profiles-daemon',
    'hyprshot',
    'hyprlock',
]

TIMESTAMP_FORMAT = '%Y-%m-%d_%H-%M-%S'
