"""Runtime configuration, read from the environment (and a local .env file)."""

import logging
import os

from dotenv import load_dotenv

from ..utils.constants import DEFAULT_RING_STEPS, MAX_CAKE_LAYERS as _MAX_CAKE_LAYERS

load_dotenv()

logger = logging.getLogger(__name__)


def _env_number(name: str, default, cast=int):
    raw = os.getenv(name)
    if raw in (None, ""):
        return default
    try:
        return cast(raw)
    except ValueError:
        logger.warning(f"Invalid value for {name}: {raw!r}, using {default}")
        return default


# ────────────────────────────────────────────────────────────────────
#  Logging
# ────────────────────────────────────────────────────────────────────
LOG_LEVEL = os.getenv("GEODRAW_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# ────────────────────────────────────────────────────────────────────
#  Layer cake
# ────────────────────────────────────────────────────────────────────
CAKE_STEPS = _env_number("GEODRAW_CAKE_STEPS", DEFAULT_RING_STEPS)
MAX_CAKE_LAYERS = _env_number("GEODRAW_MAX_CAKE_LAYERS", _MAX_CAKE_LAYERS)

# ────────────────────────────────────────────────────────────────────
#  Ingestion / measurement
# ────────────────────────────────────────────────────────────────────
HTTP_TIMEOUT = _env_number("GEODRAW_HTTP_TIMEOUT", 10.0, cast=float)
MEASUREMENT_SYSTEM = os.getenv("GEODRAW_MEASUREMENT_SYSTEM", "metric").lower()
