# config_manager.py
import json
from pathlib import Path

config_json = Path(__file__).resolve().parent.parent / "config.json"


DEFAULT_SETTINGS = {
    "decimal_places": 6,
    "fractions": False,
    "degree_mode": False,
    "lenient_tokenizer": False,
    "debug": False,
    "show_steps": True,
    "copy_result": False,
    "graph_domain": [-10, 10],
    "graph_samples": 201,
}


def load_setting_value(key_value):
    """Return one setting, or the merged settings dict for key "all".

    A missing or unreadable config file falls back to DEFAULT_SETTINGS.
    """
    settings_dict = dict(DEFAULT_SETTINGS)
    try:
        with open(config_json, 'r', encoding='utf-8') as f:
            stored = json.load(f)
        if isinstance(stored, dict):
            settings_dict.update(stored)

    except (FileNotFoundError, json.JSONDecodeError):
        pass

    if key_value == "all":
        return settings_dict

    else:
        return settings_dict.get(key_value, 0)


def resolve_settings(settings):
    """Fill a caller supplied (possibly partial) settings dict with defaults."""
    if settings is None:
        return load_setting_value("all")
    merged = dict(DEFAULT_SETTINGS)
    merged.update(settings)
    return merged


def save_setting(settings_dict):
    try:
        with open(config_json, 'w', encoding='utf-8') as f:
            json.dump(settings_dict, f, indent=4)
            return settings_dict

    except OSError:
        return {}
