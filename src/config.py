"""Settings loaded from environment variables (+ optional .env).

Priority: real environment variable > .env entry > default. Command-line
options in main.py override the result.
"""
from __future__ import annotations
import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

ENV_PREFIX = 'TASKS'
PROJECT_ROOT = Path(__file__).resolve().parent.parent

HEX_PRIMARY_DEFAULT = '#476EAE'
HEX_DUE_TODAY_DEFAULT = '#F6FF99'
HEX_OVERDUE_DEFAULT = '#E5533D'
HEX_DONE_DEFAULT = '#A7E399'


def _k(suffix: str) -> str:
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = '') -> str:
    v = os.getenv(name)
    return default if v is None or v.strip() == '' else v.strip()


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() not in {'0', 'false', 'no', 'off', ''}


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == '':
        return default
    return Path(raw).expanduser()


def _env_hex(name: str, default: str) -> str:
    """Accept 'RRGGBB' or '#RRGGBB'; anything else falls back to default."""
    h = _env(name).lstrip('#')
    if len(h) == 6 and all(c in '0123456789abcdefABCDEF' for c in h):
        return '#' + h
    return default


@dataclass(frozen=True)
class Settings:
    data_dir: Path
    log_dir: Path
    log_level: str
    alt_screen: bool
    color_primary: str
    color_due_today: str
    color_overdue: str
    color_done: str

    @staticmethod
    def from_env() -> 'Settings':
        data_dir = _env_path(_k('DATA_DIR'), PROJECT_ROOT / 'data')
        return Settings(
            data_dir=data_dir,
            log_dir=_env_path(_k('LOG_DIR'), data_dir / 'logs'),
            log_level=_env(_k('LOG_LEVEL'), 'INFO').upper(),
            alt_screen=_env_bool(_k('ALT_SCREEN'), True),
            color_primary=_env_hex(_k('COLOR_PRIMARY'), HEX_PRIMARY_DEFAULT),
            color_due_today=_env_hex(_k('COLOR_DUE_TODAY'), HEX_DUE_TODAY_DEFAULT),
            color_overdue=_env_hex(_k('COLOR_OVERDUE'), HEX_OVERDUE_DEFAULT),
            color_done=_env_hex(_k('COLOR_DONE'), HEX_DONE_DEFAULT),
        )


@lru_cache(maxsize=1)
def get_settings(env_file: Optional[str] = None) -> Settings:
    load_dotenv(env_file or PROJECT_ROOT / '.env', override=False)
    return Settings.from_env()
