# Application logger plus helpers for logging untrusted model output
# aceai/utils/logger.py
import logging
import re
import sys
from aceai.utils.config import settings

# Inline images travel as data URLs; only their size is worth logging.
_DATA_URL_RE = re.compile(r"data:([\w.+-]+/[\w.+-]+);base64,[A-Za-z0-9+/=]+")

logger = logging.getLogger("aceai")

# Unknown level names fall back to INFO.
log_level = getattr(logging, settings.log_level, logging.INFO)
logger.setLevel(log_level)

# Hot-reloads re-import this module; avoid stacking handlers.
if logger.hasHandlers():
    logger.handlers.clear()

handler = logging.StreamHandler(sys.stdout)
formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
handler.setFormatter(formatter)
logger.addHandler(handler)
logger.propagate = False

# The model client's HTTP chatter is only useful when debugging.
if log_level > logging.DEBUG:
    for noisy in ("httpx", "openai"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def preview(raw, limit: int | None = None) -> str:
    """
    Loggable form of a model completion: inline images are reduced to their
    media type and size, and the text is cut to `limit` characters.
    """
    limit = settings.log_preview_chars if limit is None else limit
    text = _DATA_URL_RE.sub(lambda m: f"<{m.group(1)} image, {len(m.group(0))} chars>", str(raw or ""))
    if len(text) > limit:
        text = f"{text[:limit]}... [{len(text) - limit} more chars]"
    return repr(text)
