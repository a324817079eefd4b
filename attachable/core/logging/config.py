import logging
import logging.config
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from attachable.core.config import settings

FORMATTERS = "attachable.core.logging.formatters"
FILTERS = "attachable.core.logging.filters"

# Third party loggers kept at WARNING so their chatter doesn't drown ours
QUIET_LOGGERS = ("sqlalchemy", "boto3", "botocore", "s3transfer", "urllib3", "PIL")


def _stream_handler(formatter: str, level: str, stream: str, filters: List[str]) -> Dict[str, Any]:
    return {
        "class": "logging.StreamHandler",
        "level": level,
        "formatter": formatter,
        "filters": filters,
        "stream": f"ext://sys.{stream}",
    }


def get_logging_config(level: Optional[str] = None) -> Dict[str, Any]:
    """
    Build the ``dictConfig`` configuration for the current environment.

    Locally records go to stdout through the console formatter. Elsewhere the
    production formatter writes to stdout, with errors also sent to stderr.

    Args:
        level: Level of the ``attachable`` logger, defaults to
            ``settings.LOG_LEVEL`` or an environment specific level

    Returns:
        The configuration dictionary
    """
    is_local = settings.ENVIRONMENT == "local"
    context_filters = ["context_filter", "operation_id"]

    if is_local:
        formatters = {
            "console": {"()": f"{FORMATTERS}.ConsoleFormatter"},
        }
        handlers = {
            "console": _stream_handler("console", "DEBUG", "stdout", context_filters),
        }
    else:
        formatters = {
            "production": {"()": f"{FORMATTERS}.ProductionFormatter"},
        }
        handlers = {
            "json_stdout": _stream_handler("production", "INFO", "stdout", context_filters),
            "error_stderr": _stream_handler("production", "ERROR", "stderr", ["context_filter"]),
        }

    handler_names = list(handlers)
    library_level = level or settings.LOG_LEVEL or ("DEBUG" if is_local else "INFO")

    loggers: Dict[str, Any] = {
        "attachable": {"level": library_level, "handlers": handler_names, "propagate": False},
    }
    loggers.update({name: {"level": "WARNING", "propagate": True} for name in QUIET_LOGGERS})

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": formatters,
        "filters": {
            "context_filter": {"()": f"{FILTERS}.CombinedContextFilter"},
            "operation_id": {"()": f"{FILTERS}.OperationIdFilter"},
        },
        "handlers": handlers,
        "loggers": loggers,
        "root": {"level": "WARNING", "handlers": handler_names},
    }


def load_config_from_yaml(config_path: Path) -> Optional[Dict[str, Any]]:
    """
    Load a logging configuration from YAML, None if the file doesn't exist or
    can't be parsed.
    """
    if not config_path.exists():
        return None

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        print(f"Failed to load logging config from {config_path}: {e}", file=sys.stderr)
        return None


def setup_logging(config_override: Optional[Dict[str, Any]] = None, level: Optional[str] = None) -> None:
    """
    Configure logging for an application using attachable. The library never
    calls this itself.

    The first configuration found wins:
    1. ``config_override``
    2. ``<BASE_DIR>/config/logging.<ENVIRONMENT>.yaml``
    3. ``<BASE_DIR>/config/logging.yaml``
    4. ``get_logging_config(level)``
    """
    config = config_override

    config_dir = Path(settings.BASE_DIR) / "config"
    for candidate in (f"logging.{settings.ENVIRONMENT}.yaml", "logging.yaml"):
        if config is not None:
            break
        config = load_config_from_yaml(config_dir / candidate)

    if config is None:
        config = get_logging_config(level)

    try:
        logging.config.dictConfig(config)
    except (ValueError, TypeError, AttributeError, ImportError) as e:
        print(f"Failed to configure logging: {e}", file=sys.stderr)
        logging.basicConfig(level=logging.INFO, stream=sys.stdout)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
