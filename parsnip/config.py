import logging
import os
from pathlib import Path

from dotenv import load_dotenv

ROOT_PATH = Path(__file__).resolve().parent.parent
ENV_FILE = ROOT_PATH / "parsnip.env"

load_dotenv(ENV_FILE)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _get_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def preferences_path() -> Path:
    """Where the unit/language/region preferences are persisted."""
    return Path(os.getenv("PARSNIP_PREFERENCES_PATH", ROOT_PATH / "preferences.json"))


def plugins_path() -> Path | None:
    """Optional JSON file overriding the default tool-server plugins."""
    raw = os.getenv("PARSNIP_PLUGINS_PATH")
    return Path(raw) if raw else None


def server_options() -> dict[str, str | int | bool]:
    return {
        "host": os.getenv("PARSNIP_HOST", "127.0.0.1"),
        "port": int(os.getenv("PARSNIP_PORT", "5001")),
        "debug": _get_bool("PARSNIP_DEBUG", True),
    }


def configure_logging(level: str | None = None) -> None:
    level = (level or os.getenv("PARSNIP_LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(level=level, format=LOG_FORMAT)
