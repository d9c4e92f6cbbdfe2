"""
optimizer_config.py - Defaults for the laser optimizer.

Settings come from three layers, later ones winning:
built-in DEFAULT_CONFIG, an optional flat `key: value` defaults file
(optimizer.yaml by default) and command line flags.
"""

import os

DEFAULT_CONFIG_PATH = "optimizer.yaml"

DEFAULT_CONFIG = {
    "precision": 4,
    "stroke": "#000000",
    "stroke_width": "0.35 px",
    "style": "stroke-width:0.35;fill:#ffffff;fill-opacity:1.0;",
    "output_suffix": "new",
    "show_progress": True,
}


def load_optimizer_config(config_path=DEFAULT_CONFIG_PATH):
    """Load optimizer defaults from a flat `key: value` file.

    Numbers are converted to int or float, true/false to booleans and
    surrounding quotes are stripped from strings. Blank lines and lines
    starting with '#' are ignored. A missing file yields an empty dict.
    """
    if not config_path or not os.path.exists(config_path):
        return {}
    config = {}
    with open(config_path, "r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            if ":" not in line:
                continue
            key, value = line.split(":", 1)
            config[key.strip()] = _convert_value(value.strip())
    return config


def _convert_value(value):
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return value[1:-1]
    try:
        return int(value)
    except ValueError:
        pass
    try:
        return float(value)
    except ValueError:
        pass
    if value.lower() in ("true", "false"):
        return value.lower() == "true"
    return value


def resolve_config(args=None, file_config=None):
    """Merge built-in defaults, file settings and parsed CLI arguments.

    Only CLI attributes that were actually given (not None) override the
    file and built-in values.
    """
    config = dict(DEFAULT_CONFIG)
    if file_config:
        config.update(file_config)
    if args is not None:
        if getattr(args, "no_progress", False):
            config["show_progress"] = False
        if getattr(args, "precision", None) is not None:
            config["precision"] = args.precision
    config["precision"] = int(config["precision"])
    return config
