# config.py
# Defaults live here; credentials come from ~/.amorc (or the file named by $AMORC)
import configparser
import logging
import os
from pathlib import Path

from .errors import ConfigError

LOG = logging.getLogger(__name__)

REDASH_URL = "https://sql.telemetry.mozilla.org/"
REDASH_AMO_DB = 25    # data source id of the add-ons database
QUERY_TIMEOUT = 120   # seconds
POLL_INTERVAL = 1     # seconds between job status checks

# Tables the generated queries may touch
ALLOWED_TABLES = [
    "addons",
    "addons_users",
    "versions",
    "files",
]

FORMAT_CHOICES = ["id", "guid", "slug", "user_id"]
BASE_COLUMNS = ["id", "guid", "slug"]
GUID_REUSE_PATTERN = "guid-reused-by-pk-%"

BACKENDS = ("redash", "databricks")
DATABRICKS_KEYS = ("server_hostname", "http_path", "access_token")


def config_path() -> Path:
    env = os.environ.get("AMORC")
    if env:
        return Path(env).expanduser()
    return Path.home() / ".amorc"


def load_config(path=None) -> dict:
    """
    Read the user config file and return a plain dict:
      {"backend": "redash"|"databricks",
       "redash": {"api_key", "url", "data_source_id"},
       "databricks": {"server_hostname", "http_path", "access_token"} or None}
    Raises ConfigError if the file is missing, malformed or lacks the credential
    needed by the selected backend.
    """
    path = Path(path) if path else config_path()
    parser = configparser.ConfigParser()
    try:
        with open(path, encoding="utf-8") as fh:
            parser.read_file(fh)
    except OSError as e:
        raise ConfigError(f"Could not read config file {path}: {e.strerror or e}") from e
    except configparser.Error as e:
        raise ConfigError(f"Malformed config file {path}: {e}") from e

    backend = parser.get("query", "backend", fallback="redash").strip().lower()
    if backend not in BACKENDS:
        raise ConfigError(f"Unknown query backend '{backend}' in {path}")

    try:
        data_source_id = parser.getint("redash", "data_source_id", fallback=REDASH_AMO_DB)
    except ValueError as e:
        raise ConfigError(f"Invalid redash data_source_id in {path}") from e

    cfg = {
        "backend": backend,
        "redash": {
            "api_key": parser.get("auth", "redash_key", fallback="").strip(),
            "url": parser.get("redash", "url", fallback=REDASH_URL),
            "data_source_id": data_source_id,
        },
        "databricks": None,
    }

    if backend == "redash" and not cfg["redash"]["api_key"]:
        raise ConfigError(f"Missing redash API key in {path}")

    if backend == "databricks":
        section = parser["databricks"] if parser.has_section("databricks") else {}
        values = {k: section.get(k, "").strip() for k in DATABRICKS_KEYS}
        missing = [k for k, v in values.items() if not v]
        if missing:
            raise ConfigError(f"Missing databricks settings in {path}: {', '.join(missing)}")
        cfg["databricks"] = values

    LOG.debug("Loaded config from %s (backend=%s)", path, backend)
    return cfg
