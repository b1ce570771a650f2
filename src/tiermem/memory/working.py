"""Working memory implementation.

This module implements the working memory tier: at most one active,
task-scoped session holding intermediate results, scratchpad notes and the
current attention focus. Working memory is drained into episodic memory by
the consolidation pipeline.
"""

import json
import logging

from tiermem.core.types import WorkingContext, WorkingSession
from tiermem.core.utils import Clock, generate_id, utc_now

logger = logging.getLogger(__name__)


class WorkingMemory:
    """Holds the single active task session.

    Starting a session discards any previous one. Writes made while no
    session is active are silently ignored.

    Attributes:
        session: The live session, or None.
    """

    def __init__(self, clock: Clock = utc_now):
        """Initialize working memory.

        Args:
            clock: Callable returning the current time.
        """
        self._clock = clock
        self.session: WorkingSession | None = None

    def start_session(self, task: str, objective: str) -> WorkingSession:
        """Start a new session, replacing any existing one.

        Args:
            task: Task being worked on.
            objective: What the task should achieve.

        Returns:
            The new session.
        """
        if self.session is not None:
            logger.info(f"Discarding session {self.session.id} to start a new one")

        now = self._clock()
        self.session = WorkingSession(
            id=generate_id("session", now),
            task=task,
            objective=objective,
            started_at=now,
        )
        logger.info(f"Started session {self.session.id} for task '{task}'")
        return self.session

    def store_intermediate(self, key: str, data: object) -> None:
        """Record a partial result under ``key`` in the active session."""
        if self.session is None:
            logger.debug(f"No active session, ignoring intermediate result '{key}'")
            return
        self.session.intermediate_results[key] = data

    def set_scratchpad(self, key: str, value: str) -> None:
        """Write a scratchpad note under ``key`` in the active session."""
        if self.session is None:
            logger.debug(f"No active session, ignoring scratchpad entry '{key}'")
            return
        self.session.scratchpad[key] = value

    def update_attention(self, focus: str) -> None:
        """Set the attention focus of the active session."""
        if self.session is None:
            logger.debug("No active session, ignoring attention update")
            return
        self.session.attention_focus = focus

    def get_working_context(self) -> WorkingContext:
        """Get a snapshot of working memory.

        Returns:
            WorkingContext holding a deep copy of the session, or no session.
        """
        if self.session is None:
            return WorkingContext()
        return WorkingContext(session=self.session.model_copy(deep=True))

    def has_active_session(self) -> bool:
        return self.session is not None

    def clear_session(self) -> WorkingSession | None:
        """Detach and return the live session.

        Returns:
            The session that was active, or None.
        """
        session = self.session
        self.session = None
        if session is not None:
            logger.debug(f"Cleared session {session.id}")
        return session

    def restore_session(self, session: WorkingSession) -> None:
        """Re-attach a previously detached session.

        Used when a session was cleared for consolidation but could not be
        recorded. A session started in the meantime wins.
        """
        if self.session is not None:
            logger.warning(
                f"Session {self.session.id} is active, not restoring {session.id}"
            )
            return
        self.session = session
        logger.info(f"Restored session {session.id}")

    def render_context(self) -> str:
        """Render the active session as markdown for display.

        Returns:
            Formatted context string, empty when no session is active.
        """
        if self.session is None:
            return ""

        session = self.session
        sections = [f"# Current Task\n{session.task}\n\nObjective: {session.objective}"]

        if session.attention_focus:
            sections.append(f"# Focus\n{session.attention_focus}")

        if session.intermediate_results:
            results_text = "\n".join(
                f"- {key}: {json.dumps(value, default=str)}"
                for key, value in session.intermediate_results.items()
            )
            sections.append(f"# Intermediate Results\n{results_text}")

        if session.scratchpad:
            notes_text = "\n".join(
                f"- {key}: {value}" for key, value in session.scratchpad.items()
            )
            sections.append(f"# Scratchpad\n{notes_text}")

        return "\n\n".join(sections)

    def reset(self) -> None:
        """Drop the active session, if any."""
        self.session = None
