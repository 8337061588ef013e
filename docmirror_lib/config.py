# --- docmirror_lib/config.py ---
import configparser
import logging
import os

log = logging.getLogger("docmirror.config")

DEFAULT_CONFIG_PATH = os.path.join(os.path.expanduser("~"), ".docmirror.cfg")


class ConfigService:
    """Manages reading from and writing to the docmirror.cfg file."""

    def __init__(self, config_path: str = DEFAULT_CONFIG_PATH):
        self.config_path = config_path
        self.defaults = {
            "Render": {
                "font": "helvetica",
                "font_size": "12",
                "line_spacing": "1.5",
                "scale": "1.0",
            },
            "Fonts": {
                "language": "English",
                "cache_dir": os.path.join(os.path.expanduser("~"), ".cache", "docmirror", "fonts"),
                "timeout": "20",
            },
            "Extraction": {
                "embed_images": "true",
            },
        }
        self._config = None

    def _load(self) -> configparser.ConfigParser:
        if self._config is None:
            config = configparser.ConfigParser()
            config.read_dict(self.defaults)
            if not config.read(self.config_path):
                log.info("Config file not found at %s. Creating with defaults.", self.config_path)
                self.save_settings(self._config_to_dict(config))
            self._config = config
        return self._config

    def get_settings(self) -> dict:
        """Reads settings from the config file, applying defaults if missing."""
        return self._config_to_dict(self._load())

    def save_settings(self, settings: dict):
        """Saves a dictionary of settings to the config file."""
        config = configparser.ConfigParser()
        for section, values in settings.items():
            config[section] = {k: str(v) for k, v in values.items()}

        try:
            with open(self.config_path, "w") as configfile:
                config.write(configfile)
            log.info("Settings successfully saved to %s", self.config_path)
        except IOError as e:
            log.error("Failed to write settings to %s: %s", self.config_path, e)
        self._config = None

    def get(self, section: str, key: str) -> str:
        return self._load().get(section, key)

    def get_float(self, section: str, key: str) -> float:
        try:
            return self._load().getfloat(section, key)
        except ValueError:
            log.warning("Invalid number for [%s] %s; using default.", section, key)
            return float(self.defaults[section][key])

    def get_int(self, section: str, key: str) -> int:
        try:
            return self._load().getint(section, key)
        except ValueError:
            log.warning("Invalid integer for [%s] %s; using default.", section, key)
            return int(self.defaults[section][key])

    def get_bool(self, section: str, key: str) -> bool:
        try:
            return self._load().getboolean(section, key)
        except ValueError:
            log.warning("Invalid boolean for [%s] %s; using default.", section, key)
            return self.defaults[section][key].lower() == "true"

    def _config_to_dict(self, config: configparser.ConfigParser) -> dict:
        """Converts a ConfigParser object to a nested dictionary."""
        return {s: dict(config.items(s)) for s in config.sections()}
