import logging
from logging import Logger
from typing import Optional

from .config import get_settings

LOG_FORMAT = "[%(levelname)s] %(asctime)s | %(name)s | %(message)s"


def configure_logging(component: Optional[str] = None) -> Logger:
    """إرجاع مسجل التطبيق، أو مسجل فرعي لمكوّن محدد يرث معالجاته."""
    settings = get_settings()

    root = logging.getLogger(settings.app_name)
    if not root.handlers:
        root.setLevel(settings.log_level.upper())
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
        root.propagate = False

    if component:
        return root.getChild(component)
    return root
