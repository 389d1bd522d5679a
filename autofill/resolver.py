"""
Resolve ranked locator candidates to a live, editable element
"""
import logging

logger = logging.getLogger(__name__)

INTERACTIVE_JS = """el => {
    const style = window.getComputedStyle(el);
    const rect = el.getBoundingClientRect();
    return (
        (el.type || '').toLowerCase() !== 'hidden' &&
        style.display !== 'none' &&
        style.visibility !== 'hidden' &&
        !el.disabled &&
        !el.readOnly &&
        el.getAttribute('aria-disabled') !== 'true' &&
        rect.width > 0 &&
        rect.height > 0
    );
}"""


def is_interactive(locator, timeout=2000):
    """Visible (non-zero box, displayed) and editable (enabled, writable, not hidden input)."""
    try:
        return bool(locator.evaluate(INTERACTIVE_JS, timeout=timeout))
    except Exception as e:
        logger.debug(f"Interactivity check failed: {e}")
        return False


class ElementResolver:
    def __init__(self, page, timeout=2000):
        self.page = page
        self.timeout = timeout

    def resolve(self, candidates):
        """
        First candidate whose first node is visible and interactive.

        Returns (locator, candidate_index) or (None, None).
        """
        for index, candidate in enumerate(candidates):
            locator = self._first_match(candidate)
            if locator is None:
                continue
            if is_interactive(locator, timeout=self.timeout):
                logger.debug(f"Resolved with candidate {index + 1}/{len(candidates)}: {candidate.expression}")
                return locator, index
            if candidate.tier == "override":
                logger.warning(f"Custom selector matched an unusable element, falling back: {candidate.expression}")
        return None, None

    def _first_match(self, candidate):
        try:
            locator = self.page.locator(candidate.selector).first
            if locator.count() > 0:
                return locator
        except Exception as e:
            # Malformed or unsupported expression counts as no match.
            logger.debug(f"Candidate failed to evaluate ({candidate.expression}): {e}")
        return None
