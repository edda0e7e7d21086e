from pathlib import Path

from rich.console import Console

console = Console()

_log_console: Console | None = None
_log_handle = None
_verbose = False


def set_verbose(value: bool):
    global _verbose
    _verbose = value


def start_log(path: Path):
    """Mirror every message into a plain-text log file."""
    global _log_console, _log_handle
    stop_log()
    path.parent.mkdir(parents=True, exist_ok=True)
    _log_handle = open(path, 'a')
    _log_console = Console(file=_log_handle, no_color=True, width=120, log_path=False)


def stop_log():
    global _log_console, _log_handle
    if _log_handle is not None:
        _log_handle.close()
    _log_console = None
    _log_handle = None


def _emit(msg: str, level: str):
    console.print(msg)
    if _log_console is not None:
        _log_console.log(f'[{level}] {msg}')


def info(msg: str):
    _emit(msg, 'INFO')


def debug(msg: str):
    if _verbose:
        _emit(f'[blue]…[/blue] {msg}', 'DEBUG')


def success(msg: str):
    _emit(f'[green]✓[/green] {msg}', 'INFO')


def warning(msg: str):
    _emit(f'[yellow]![/yellow] {msg}', 'WARN')


def error(msg: str):
    _emit(f'[red]✗[/red] {msg}', 'ERROR')


def added(msg: str):
    _emit(f'[green]  + {msg}[/green]', 'INFO')


def removed(msg: str):
    _emit(f'[red]  - {msg}[/red]', 'INFO')


def header(msg: str):
    console.print(f'\n[bold]{msg}[/bold]')
    if _log_console is not None:
        _log_console.log(f'[INFO] {msg}')
