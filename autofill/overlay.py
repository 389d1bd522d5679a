"""
Highlight/notification hooks called by the engine.

The engine never renders anything itself; a UI adapter subclasses Overlay.
"""
import logging

logger = logging.getLogger(__name__)


class Overlay:
    def highlight(self, locator, field_name):
        logger.debug(f"[HIGHLIGHT] {field_name}")

    def notify(self, message, level="success"):
        if level == "success":
            logger.info(f"[NOTIFY] {message}")
        else:
            logger.warning(f"[NOTIFY:{level}] {message}")
