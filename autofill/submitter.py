"""
Activating the page's own "next"/"submit" control after a fill
"""
import logging

from autofill.config import NEXT_TERMS, SUBMIT_TERMS
from autofill.resolver import is_interactive

logger = logging.getLogger(__name__)

KNOWN_NEXT_SELECTORS = [
    'button[aria-label="Next"]',
    'button[data-automation-id="nextButton"]',
    'button[data-automation-id="submitButton"]',
    '[role="button"][aria-label="Next"]',
]

CONTROLS = "button, input[type='submit'], input[type='button'], [role='button']"

CONTROL_TEXT_JS = """els => els.map(e => [
    (e.innerText || e.textContent || '').trim(),
    (e.value || '').trim(),
    (e.getAttribute('aria-label') || '').trim()
].filter(Boolean).join(' '))"""


class SubmitHandler:
    def __init__(self, page, next_terms=None, submit_terms=None):
        self.page = page
        self.next_terms = [t.lower() for t in (next_terms or NEXT_TERMS)]
        self.submit_terms = [t.lower() for t in (submit_terms or SUBMIT_TERMS)]

    def find_next_control(self):
        """
        First visible advance control: known platform buttons, then text
        matches against the "next" vocabulary, then the "submit" vocabulary.
        """
        for selector in KNOWN_NEXT_SELECTORS:
            try:
                locator = self.page.locator(selector).first
                if locator.count() > 0 and is_interactive(locator):
                    logger.info(f"Found advance control via {selector}")
                    return locator
            except Exception:
                continue

        try:
            controls = self.page.locator(CONTROLS)
            texts = controls.evaluate_all(CONTROL_TEXT_JS)
        except Exception as e:
            logger.debug(f"Could not read page controls: {e}")
            return None

        for terms in (self.next_terms, self.submit_terms):
            for i, text in enumerate(texts):
                lowered = (text or "").lower()
                if not any(term in lowered for term in terms):
                    continue
                locator = controls.nth(i)
                if is_interactive(locator):
                    logger.info(f"Found advance control by text: '{text[:40]}'")
                    return locator
        return None

    def click_next(self):
        """Best effort; returns True when a control was clicked."""
        locator = self.find_next_control()
        if locator is None:
            logger.info("No next/submit control found on the page")
            return False
        try:
            locator.focus(timeout=2000)
            locator.evaluate("el => el.click()")
        except Exception as e:
            logger.warning(f"Error clicking next control: {e}")
            return False
        for event in ("mousedown", "mouseup", "click"):
            try:
                locator.dispatch_event(event, timeout=1000)
            except Exception:
                break
        logger.info("[OK] Advance control clicked")
        return True
