"""
Fill a whole profile on the current page
"""
import logging
import time

from autofill.cascade import SelectorCascade
from autofill.config import EngineConfig
from autofill.filler import FormFiller
from autofill.models import FailureKind, FillReport, FillResult
from autofill.overlay import Overlay
from autofill.resolver import ElementResolver
from autofill.submitter import SubmitHandler

logger = logging.getLogger(__name__)

FIELD_QUERY = "input:not([type='hidden']), textarea, select, [role='radio'], [role='listbox']"


class PatternCache:
    """Field name -> last expression that resolved it. Full cache stops accepting new names."""

    def __init__(self, max_entries=256):
        self.max_entries = max_entries
        self._patterns = {}

    def get(self, name):
        return self._patterns.get(name)

    def put(self, name, candidate):
        if name in self._patterns or len(self._patterns) < self.max_entries:
            self._patterns[name] = candidate

    def __len__(self):
        return len(self._patterns)


class FillOrchestrator:
    def __init__(self, page, config=None, overlay=None, sleep=time.sleep,
                 resolver=None, filler=None, submitter=None):
        self.page = page
        self.config = config or EngineConfig()
        self.overlay = overlay or Overlay()
        self.sleep = sleep
        self.resolver = resolver or ElementResolver(page)
        self.filler = filler or FormFiller(page, self.config, sleep=sleep)
        self.submitter = submitter or SubmitHandler(
            page, self.config.next_terms, self.config.submit_terms
        )
        self.cache = PatternCache(self.config.pattern_cache_size)
        self._filling = False

    @property
    def is_filling(self):
        return self._filling

    def fill_profile(self, profile):
        """
        Fill every field of the profile in declared order.

        Returns a FillReport, or None when a fill is already running.
        """
        if self._filling:
            logger.warning(f"Fill already in progress, dropping request for '{profile.name}'")
            return None

        self._filling = True
        try:
            logger.info(f"Starting form fill with profile '{profile.name}' ({len(profile.fields)} fields)")
            self._wait_for_fields()

            report = FillReport()
            filled_locators = []
            for i, field in enumerate(profile.fields, start=1):
                logger.info(f"Processing field {i}/{len(profile.fields)}: '{field.name}' ({field.type.value})")
                result, locator = self._fill_field(field)
                report.add(result)
                if result.success:
                    filled_locators.append((field.name, locator))
                    logger.info(f"[OK] Filled '{field.name}'")
                else:
                    logger.warning(f"[X] '{field.name}': {result.error}")

            logger.info(f"Form fill completed: {report.summary()}")
            if report.success:
                for name, locator in filled_locators:
                    self._overlay("highlight", locator, name)
                self._overlay("notify", report.summary())
                if self.config.auto_advance:
                    self.sleep(self.config.advance_delay)
                    self._advance()
            else:
                self._overlay("notify", "No fields were filled", "warning")
            return report
        finally:
            self._filling = False

    def _fill_field(self, field):
        try:
            candidates = SelectorCascade.generate(field.name, field.type, field.selector, field.value)
            cached = self.cache.get(field.name)
            if cached is not None:
                candidates = [cached] + [c for c in candidates if c != cached]

            locator, index = self.resolver.resolve(candidates)
            if locator is None:
                return FillResult(
                    field=field.name,
                    success=False,
                    error=f"Element not found for field: {field.name}",
                    failure=FailureKind.LOCATE,
                ), None

            self.cache.put(field.name, candidates[index])
            if not self.filler.fill(locator, field):
                return FillResult(
                    field=field.name,
                    success=False,
                    error=f"Failed to fill field: {field.name}",
                    failure=FailureKind.FILL,
                    candidate_index=index,
                ), locator
            return FillResult(field=field.name, success=True, candidate_index=index), locator
        except Exception as e:
            logger.error(f"Unexpected error on field '{field.name}': {e}")
            return FillResult(
                field=field.name, success=False, error=str(e), failure=FailureKind.UNEXPECTED
            ), None

    def _wait_for_fields(self):
        """Bounded wait for the page to render form controls; proceeds either way."""
        attempts = max(1, self.config.render_wait_attempts)
        for attempt in range(attempts):
            try:
                if self.page.locator(FIELD_QUERY).count() > 0:
                    return True
            except Exception as e:
                logger.debug(f"Field count failed: {e}")
            if attempt < attempts - 1:
                self.sleep(self.config.render_wait_delay)
        logger.info("No form controls rendered yet, continuing anyway")
        return False

    def _advance(self):
        try:
            if self.submitter.click_next():
                self._overlay("notify", "Form filled, moving to the next page")
        except Exception as e:
            logger.warning(f"Advance control click failed: {e}")

    def _overlay(self, method, *args):
        try:
            getattr(self.overlay, method)(*args)
        except Exception as e:
            logger.warning(f"Overlay {method} failed: {e}")
