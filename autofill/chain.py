"""
Run a profile and its successors across page transitions
"""
import logging
import time

from autofill.config import EngineConfig
from autofill.errors import ChainAbort, ChainTooLongError, CircularChainError
from autofill.models import ChainContext, ChainOutcome, ChainStatus
from autofill.overlay import Overlay

logger = logging.getLogger(__name__)


class ChainController:
    """
    Executes profile chains with cycle and depth protection.

    `profiles` is any mapping of profile id to Profile. Each hop gets a new
    ChainContext; a context handed in by the caller is never modified.
    """

    def __init__(self, profiles, orchestrator, config=None, overlay=None,
                 sleep=time.sleep, on_profile_used=None):
        self.profiles = profiles
        self.orchestrator = orchestrator
        self.config = config or EngineConfig()
        self.overlay = overlay or Overlay()
        self.sleep = sleep
        self.on_profile_used = on_profile_used

    def run(self, profile_id, context=None):
        context = context or ChainContext()
        outcome = ChainOutcome(status=ChainStatus.COMPLETED)

        if self.profiles.get(profile_id) is None:
            logger.warning(f"Profile not found: {profile_id}")
            outcome.status = ChainStatus.NOT_FOUND
            outcome.message = f"Profile not found: {profile_id}"
            return outcome

        current_id = profile_id
        while current_id is not None:
            try:
                self._check_hop(current_id, context)
            except ChainAbort as abort:
                logger.warning(f"[CHAIN] {abort.message} at '{abort.profile_id}'")
                self._notify(abort.message, "warning")
                outcome.status = ChainStatus(abort.status)
                outcome.message = abort.message
                return outcome

            profile = self.profiles[current_id]
            context = context.advance(current_id)
            logger.info(f"[CHAIN] Executing profile '{profile.name}' (depth: {context.depth - 1})")

            report = self.orchestrator.fill_profile(profile)
            if report is None:
                outcome.status = ChainStatus.BUSY
                outcome.message = "A fill is already in progress"
                return outcome
            outcome.reports.append((current_id, report))

            if not report.success:
                outcome.status = ChainStatus.FAILED
                outcome.message = f"Profile '{profile.name}' filled no fields"
                return outcome

            self._record_usage(profile)
            current_id = self._successor(profile)
            if current_id is not None:
                logger.info(f"[CHAIN] Profile '{profile.name}' completed, continuing to '{current_id}'")
                self._notify(f"Profile {profile.name} completed, moving to the next one")
                self.sleep(self.config.chain_settle_delay)

        outcome.message = "; ".join(f"{pid}: {r.summary()}" for pid, r in outcome.reports)
        return outcome

    def _check_hop(self, profile_id, context):
        if profile_id in context.visited:
            raise CircularChainError(profile_id)
        if context.depth >= self.config.max_chain_depth:
            raise ChainTooLongError(profile_id, context.depth)

    def _successor(self, profile):
        next_id = profile.next_profile_id
        if not next_id:
            return None
        if self.profiles.get(next_id) is None:
            logger.warning(f"[CHAIN] Successor '{next_id}' of '{profile.name}' no longer exists")
            return None
        return next_id

    def _record_usage(self, profile):
        profile.record_usage()
        if self.on_profile_used is not None:
            try:
                self.on_profile_used(profile)
            except Exception as e:
                logger.warning(f"Usage callback failed for '{profile.name}': {e}")

    def _notify(self, message, level="success"):
        try:
            self.overlay.notify(message, level)
        except Exception as e:
            logger.warning(f"Overlay notify failed: {e}")
