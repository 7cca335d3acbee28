"""Application state machine -- the lifecycle of the single active document.

``JourneyController`` is the only writer of the current document. It processes
one trigger at a time on the event loop; a trigger that arrives while an
operation is in flight is rejected with ``InvalidTransition``.

Every state change bumps an epoch. Operation results and delayed timers carry
the epoch they were started under and are dropped once it is stale, so a late
completion can never rewrite a state that has already moved on.
A trigger whose caller is cancelled takes its failure path before the
cancellation propagates, so no working state outlives its request.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from .ambient import ViewContext
from .config import ServerConfig, get_config
from .deadline import Ticket, race
from .errors import ErrorCategory, InvalidTransition, categorize_error
from .extraction import extract_text
from .models.document import Document
from .service import ScreenplayService

logger = logging.getLogger(__name__)


class AppState(str, Enum):
    IDLE = "IDLE"
    READING_SOURCE = "READING_SOURCE"
    ANALYZING = "ANALYZING"
    CHECKING_KNOWLEDGE = "CHECKING_KNOWLEDGE"
    UPDATING = "UPDATING"
    TRANSITIONING = "TRANSITIONING"
    READY = "READY"
    ERROR = "ERROR"


WORKING_STATES = frozenset({
    AppState.READING_SOURCE,
    AppState.ANALYZING,
    AppState.CHECKING_KNOWLEDGE,
    AppState.UPDATING,
    AppState.TRANSITIONING,
})
# The input form is shown in both; a submission from ERROR supersedes its auto-reset.
ENTRY_STATES = frozenset({AppState.IDLE, AppState.ERROR})
VIEW_STATES = frozenset({AppState.READY, AppState.UPDATING})

_KEEP: Any = object()


@dataclass(frozen=True)
class Notice:
    """User-facing outcome of a failed operation."""

    category: ErrorCategory
    message: str
    blocking: bool = False


def _cancelled(ticket: Ticket, blocking: bool = False) -> Notice:
    return Notice(ErrorCategory.CANCELLED, f"{ticket.operation} was cancelled", blocking=blocking)


@dataclass(frozen=True)
class JourneyStatus:
    state: AppState
    document: Document | None
    notice: Notice | None
    epoch: int

    def to_dict(self, include_document: bool = False) -> dict:
        out: dict[str, Any] = {
            "state": self.state.value,
            "busy": self.state in WORKING_STATES,
            "epoch": self.epoch,
            "title": self.document.meta.title if self.document else None,
            "scene_count": len(self.document.screenplay) if self.document else 0,
            "notice": None,
        }
        if self.notice:
            out["notice"] = {
                "category": self.notice.category.value,
                "message": self.notice.message,
                "blocking": self.notice.blocking,
            }
        if include_document and self.document:
            out["document"] = self.document.to_wire()
        return out


class JourneyController:
    """Drives which operation is in flight and what the user sees."""

    def __init__(
        self,
        service: Any = None,
        extractor: Callable[..., str] | None = None,
        config: ServerConfig | None = None,
    ) -> None:
        self._service = service or ScreenplayService()
        self._extract = extractor or extract_text
        self._config = config
        self.state = AppState.IDLE
        self.document: Document | None = None
        self.notice: Notice | None = None
        self.view: ViewContext | None = None
        self._epoch = 0
        self._timers: set[asyncio.Task] = set()

    @property
    def config(self) -> ServerConfig:
        return self._config or get_config()

    # ── transitions ──────────────────────────────────────────────────────────

    def _enter(self, state: AppState, *, document: Any = _KEEP, notice: Notice | None = None) -> int:
        previous = self.state
        self._epoch += 1
        self.state = state
        if document is not _KEEP:
            self.document = document
        self.notice = notice
        self._sync_view()
        logger.info("%s -> %s (epoch %d)", previous.value, state.value, self._epoch)
        return self._epoch

    def _begin(self, trigger: str, allowed: frozenset[AppState], state: AppState) -> Ticket:
        if self.state not in allowed:
            logger.warning("Rejected %s while %s", trigger, self.state.value)
            raise InvalidTransition(trigger, self.state.value)
        return Ticket(trigger, self._enter(state))

    def _owns(self, ticket: Ticket) -> bool:
        return ticket.epoch == self._epoch

    def _sync_view(self) -> None:
        """Mount the view context on entering the journey, drop it on leaving."""
        if self.state in VIEW_STATES and self.document is not None:
            count = len(self.document.screenplay)
            if self.view is None:
                self.view = ViewContext(count)
            else:
                self.view.scroll.resize(count)
        else:
            self.view = None

    def _schedule(self, delay: float, epoch: int, target: AppState) -> None:
        async def fire() -> None:
            await asyncio.sleep(delay)
            if self._epoch != epoch:
                logger.debug("Dropping stale timer for %s (epoch %d)", target.value, epoch)
                return
            if target is AppState.IDLE:
                self._enter(AppState.IDLE, document=None)
            else:
                self._enter(target)

        task = asyncio.get_running_loop().create_task(fire())
        self._timers.add(task)
        task.add_done_callback(self._timers.discard)

    def _transition_to(self, document: Document) -> None:
        epoch = self._enter(AppState.TRANSITIONING, document=document)
        self._schedule(self.config.settle_delay_seconds, epoch, AppState.READY)

    def _fail_to_error(self, category: ErrorCategory, message: str) -> None:
        epoch = self._enter(AppState.ERROR, document=None, notice=Notice(category, message))
        self._schedule(self.config.error_delay_seconds, epoch, AppState.IDLE)

    # ── triggers ─────────────────────────────────────────────────────────────

    async def submit_file(self, path: str) -> JourneyStatus:
        """Extract a book file, analyze it, and open the journey.

        Failures are destructive: back to IDLE with a blocking notice.
        """
        ticket = self._begin("submit_file", ENTRY_STATES, AppState.READING_SOURCE)
        cfg = self.config
        try:
            text = await race(
                ticket,
                asyncio.to_thread(
                    self._extract, path,
                    max_pages=cfg.max_source_pages, max_chars=cfg.max_source_chars,
                ),
                cfg.extract_timeout_seconds,
            )
            if not self._owns(ticket):
                return self.snapshot()
            ticket = Ticket("analyze", self._enter(AppState.ANALYZING))
            document = await race(ticket, self._service.analyze_text(text), cfg.analyze_timeout_seconds)
        except asyncio.CancelledError:
            logger.warning("%s cancelled", ticket.operation)
            if self._owns(ticket):
                self._enter(AppState.IDLE, document=None, notice=_cancelled(ticket, blocking=True))
            raise
        except Exception as exc:
            logger.warning("%s failed: %s", ticket.operation, exc)
            if self._owns(ticket):
                category, _ = categorize_error(exc)
                self._enter(AppState.IDLE, document=None, notice=Notice(category, str(exc), blocking=True))
            return self.snapshot()

        if self._owns(ticket):
            self._transition_to(document)
        return self.snapshot()

    async def submit_title(self, title: str) -> JourneyStatus:
        """Ask the producer for a book it already knows by title.

        ``known=False`` and failures both show an inline notice in ERROR, then
        fall back to IDLE after the error delay.
        """
        title = title.strip()
        if not title:
            raise ValueError("Title must not be empty")
        ticket = self._begin("submit_title", ENTRY_STATES, AppState.CHECKING_KNOWLEDGE)
        try:
            result = await race(ticket, self._service.check_title(title), self.config.title_timeout_seconds)
        except asyncio.CancelledError:
            logger.warning("Title check for %r cancelled", title)
            if self._owns(ticket):
                self._fail_to_error(ErrorCategory.CANCELLED, f"{ticket.operation} was cancelled")
            raise
        except Exception as exc:
            logger.warning("Title check for %r failed: %s", title, exc)
            if self._owns(ticket):
                category, _ = categorize_error(exc)
                self._fail_to_error(category, str(exc))
            return self.snapshot()

        if not self._owns(ticket):
            return self.snapshot()
        if result.recognized:
            self._transition_to(result.analysis)
        else:
            logger.info("Title %r not recognized", title)
            self._fail_to_error(ErrorCategory.NOT_RECOGNIZED, f"'{title}' is not a known title")
        return self.snapshot()

    async def submit_edit(self, instruction: str) -> JourneyStatus:
        """Refine the open document; on failure the current one stays in place."""
        instruction = instruction.strip()
        if not instruction:
            raise ValueError("Instruction must not be empty")
        ticket = self._begin("submit_edit", frozenset({AppState.READY}), AppState.UPDATING)
        current = self.document
        try:
            refined = await race(
                ticket, self._service.refine(current, instruction), self.config.refine_timeout_seconds,
            )
        except asyncio.CancelledError:
            logger.warning("Refinement cancelled, keeping current document")
            if self._owns(ticket):
                self._enter(AppState.READY, notice=_cancelled(ticket))
            raise
        except Exception as exc:
            logger.warning("Refinement failed, keeping current document: %s", exc)
            if self._owns(ticket):
                category, _ = categorize_error(exc)
                self._enter(AppState.READY, notice=Notice(category, str(exc)))
            return self.snapshot()

        if self._owns(ticket):
            self._enter(AppState.READY, document=refined)
        return self.snapshot()

    def reset(self) -> JourneyStatus:
        """Close the journey and discard the document."""
        if self.state is not AppState.READY:
            logger.warning("Rejected reset while %s", self.state.value)
            raise InvalidTransition("reset", self.state.value)
        self._enter(AppState.IDLE, document=None)
        return self.snapshot()

    # ── inspection ───────────────────────────────────────────────────────────

    def snapshot(self) -> JourneyStatus:
        return JourneyStatus(self.state, self.document, self.notice, self._epoch)

    async def wait_for_timers(self) -> JourneyStatus:
        """Let pending settle / auto-reset timers fire, then report."""
        while self._timers:
            await asyncio.gather(*list(self._timers))
        return self.snapshot()


# Module-level singleton
_journey: JourneyController | None = None


def get_journey() -> JourneyController:
    """Return the process-wide controller, creating it on first access."""
    global _journey
    if _journey is None:
        _journey = JourneyController()
    return _journey
