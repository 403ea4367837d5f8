# config_manager.py
import json
from pathlib import Path

config_json = Path(__file__).resolve().parent / "config.json"

# values used when the configuration file lacks a setting
DEFAULTS = {
    "decimal_places": 5,
    "degree": False,
    "instant": False,
    "corrector": False,
    "limiter": True,
    "precision": 50,
    "internal_precision": 100,
    "debug": False,
}


def load_setting_value(key_value):
    try:
        with open(config_json, 'r', encoding= 'utf-8') as f:
            settings_dict = json.load(f)

    except (FileNotFoundError, json.JSONDecodeError):
        return {}


    if key_value == "all":
        return settings_dict

    else:
        return settings_dict.get(key_value, 0)


def load_settings():
    """All settings, the missing ones filled with their default value."""
    settings_dict = dict(DEFAULTS)
    settings_dict.update(load_setting_value("all"))
    return settings_dict
