import json
import logging
import os

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "ase_swatch_config.json"


def default_config_path():
    pref_dir = os.environ.get("ASE_SWATCH_PREF_DIR")
    if pref_dir:
        return os.path.join(pref_dir, CONFIG_FILENAME)
    return os.path.join(os.path.expanduser("~"), "." + CONFIG_FILENAME)


class ConfigManager:
    """Manages loading and saving of the JSON configuration file."""
    def __init__(self, config_file=None):
        self.config_file = config_file or default_config_path()

    def load_config(self):
        if not os.path.exists(self.config_file): return {}
        try:
            with open(self.config_file, 'r') as f:
                config = json.load(f)
        except (IOError, json.JSONDecodeError) as e:
            logger.warning("Ignoring unreadable config %s: %s", self.config_file, e)
            return {}
        return config if isinstance(config, dict) else {}

    def save_config(self, config):
        try:
            with open(self.config_file, 'w') as f:
                json.dump(config, f, indent=4)
        except IOError as e:
            logger.warning("Could not save config %s: %s", self.config_file, e)

    def update(self, **values):
        config = self.load_config()
        config.update(values)
        self.save_config(config)
        return config
