import configparser
import logging
from dataclasses import asdict, dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

SETTINGS_PATH = Path(__file__).with_name("settings.ini")
SECTION = "game"


@dataclass(frozen=True)
class Settings:
    # seconds between two automatic moves to the foundations
    auto_move_secs: float = 0.2
    status_display_secs: float = 2.0
    new_game_secs: float = 1.0
    save_dir: str = "."
    save_prefix: str = "freecell_save."


DEFAULT_SETTINGS = Settings()


def _as_seconds(value, default: float) -> float:
    try:
        secs = float(value)
    except (TypeError, ValueError):
        return default
    if secs < 0 or secs != secs:
        return default
    return secs


def _sanitize(raw: dict) -> Settings:
    data = asdict(DEFAULT_SETTINGS)
    data.update({k: v for k, v in raw.items() if k in data})

    for key in ("auto_move_secs", "status_display_secs", "new_game_secs"):
        data[key] = _as_seconds(data[key], getattr(DEFAULT_SETTINGS, key))

    save_dir = str(data["save_dir"]).strip()
    data["save_dir"] = save_dir or DEFAULT_SETTINGS.save_dir
    prefix = str(data["save_prefix"]).strip()
    if not prefix or "/" in prefix or "\\" in prefix:
        prefix = DEFAULT_SETTINGS.save_prefix
    data["save_prefix"] = prefix
    return Settings(**data)


def load_settings(path: Path = None) -> Settings:
    path = Path(path) if path is not None else SETTINGS_PATH
    if not path.exists():
        return DEFAULT_SETTINGS
    parser = configparser.ConfigParser()
    try:
        parser.read(path, encoding="utf-8")
    except (configparser.Error, UnicodeDecodeError) as e:
        logger.warning("Ignoring unreadable settings file %s: %s", path, e)
        return DEFAULT_SETTINGS
    if SECTION not in parser:
        return DEFAULT_SETTINGS
    return _sanitize(dict(parser[SECTION]))


def save_settings(settings: Settings, path: Path = None):
    path = Path(path) if path is not None else SETTINGS_PATH
    data = asdict(_sanitize(asdict(settings)))
    parser = configparser.ConfigParser()
    parser[SECTION] = {k: str(v) for k, v in data.items()}
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        parser.write(f)
