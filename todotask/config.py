# -*- coding: utf-8 -*-
"""Configuration file handling."""
import configparser
import os

from .errors import ConfigError
from .timeutil import calc_duration

APP_NAME = "todotask"
DEFAULT_DATA_DIR = f"$HOME/.local/share/{APP_NAME}"
DEFAULT_CONFIG_FILE = f"$HOME/.config/{APP_NAME}/config"
DEFAULT_LOOKBACK = "5m"
DEFAULT_RETENTION = "7d"
DEFAULT_LOG_LEVEL = "WARNING"
DEFAULT_CONFIG = (
    "[main]\n"
    f"data_dir = {DEFAULT_DATA_DIR}\n"
    "# how far back to look for occurrences whose reminders are due\n"
    f"lookback = {DEFAULT_LOOKBACK}\n"
    "# how long to remember delivered reminders\n"
    f"fired_retention = {DEFAULT_RETENTION}\n"
    "# write an iCalendar file per task into this directory\n"
    "#calendar_dir = $HOME/.local/share/todotask/calendar\n"
    "# DEBUG, INFO, WARNING or ERROR\n"
    f"log_level = {DEFAULT_LOG_LEVEL}\n"
    "\n"
    "[colors]\n"
    "disable_colors = false\n"
    "# custom colors\n"
    "#title = bright_blue\n"
    "#label = white\n"
    "#date = green\n"
    "#recurring = cyan\n"
)


def _expand(path):
    return os.path.expandvars(os.path.expanduser(path))


def default_paths():
    """Locate the config file and data directory, honoring XDG variables.

    Returns:
        config_file (str):  the config file path.
        data_dir (str):     the data directory path.

    """
    if os.environ.get("XDG_CONFIG_HOME"):
        config_file = os.path.join(
            _expand(os.environ["XDG_CONFIG_HOME"]), APP_NAME, "config")
    else:
        config_file = _expand(DEFAULT_CONFIG_FILE)

    if os.environ.get("XDG_DATA_HOME"):
        data_dir = os.path.join(
            _expand(os.environ["XDG_DATA_HOME"]), APP_NAME)
    else:
        data_dir = _expand(DEFAULT_DATA_DIR)

    return config_file, data_dir


class Config():
    """Application settings read from an INI file.

    Attributes:
        config_file (str):  application config file.
        data_dir (str):     directory containing task files.
        dflt_config (str):  the default config if none is present.

    """
    def __init__(
            self,
            config_file,
            data_dir,
            dflt_config=DEFAULT_CONFIG):
        """Initializes a Config() object."""
        self.config_file = config_file
        self.data_dir = data_dir
        self.config_dir = os.path.dirname(self.config_file)
        self.dflt_config = dflt_config

        # default colors
        self.color_title = "bright_blue"
        self.color_label = "white"
        self.color_date = "green"
        self.color_recurring = "cyan"
        self.color_enabled = True

        # default settings
        self.lookback = calc_duration(DEFAULT_LOOKBACK)
        self.fired_retention = calc_duration(DEFAULT_RETENTION)
        self.calendar_dir = None
        self.log_level = DEFAULT_LOG_LEVEL

        self._default_config()
        self._parse_config()

    def _default_config(self):
        """Create a default configuration directory and file if they
        do not already exist.
        """
        if not os.path.exists(self.config_file):
            try:
                os.makedirs(self.config_dir, exist_ok=True)
                with open(self.config_file, "w",
                          encoding="utf-8") as config_file:
                    config_file.write(self.dflt_config)
            except OSError as err:
                raise ConfigError(
                    "Config file doesn't exist "
                    "and can't be created") from err

    @staticmethod
    def _notice(option, default):
        print(
            f"NOTICE: invalid config option '{option}', "
            f"defaulting to {default}."
        )

    def _parse_config(self):
        """Read and parse the configuration file."""
        config = configparser.ConfigParser()
        if not os.path.isfile(self.config_file):
            raise ConfigError("Config file not found")
        try:
            config.read(self.config_file, encoding="utf-8")
        except configparser.Error as err:
            raise ConfigError("Error reading config file") from err

        if "main" in config:
            if config["main"].get("data_dir"):
                self.data_dir = _expand(config["main"].get("data_dir"))
            # reminder lookback window
            if config["main"].get("lookback"):
                lookback = calc_duration(config["main"].get("lookback"))
                if lookback:
                    self.lookback = lookback
                else:
                    self._notice("lookback", DEFAULT_LOOKBACK)
            # fired reminder retention
            if config["main"].get("fired_retention"):
                retention = calc_duration(
                    config["main"].get("fired_retention"))
                if retention:
                    self.fired_retention = retention
                else:
                    self._notice("fired_retention", DEFAULT_RETENTION)
            if config["main"].get("calendar_dir"):
                self.calendar_dir = _expand(
                    config["main"].get("calendar_dir"))
            if config["main"].get("log_level"):
                level = config["main"].get("log_level").upper()
                if level in ("DEBUG", "INFO", "WARNING", "ERROR"):
                    self.log_level = level
                else:
                    self._notice("log_level", DEFAULT_LOG_LEVEL)

        if "colors" in config:
            if config["colors"].getboolean("disable_colors", False):
                self.color_enabled = False
                self.color_title = "default"
                self.color_label = "default"
                self.color_date = "default"
                self.color_recurring = "default"
            else:
                self.color_title = config["colors"].get(
                    "title", self.color_title)
                self.color_label = config["colors"].get(
                    "label", self.color_label)
                self.color_date = config["colors"].get(
                    "date", self.color_date)
                self.color_recurring = config["colors"].get(
                    "recurring", self.color_recurring)
