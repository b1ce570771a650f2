"""Dispatch of memory actions named by a string discriminator.

Callers outside the process (scripts, the CLI shell) send actions shaped as
``{"action": "...", "params": {...}}``. Parameters are validated with the
pydantic models below, then handed to the matching use case.
"""

import logging
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from tiermem.core.exceptions import DomainError, ValidationError
from tiermem.core.result import Result
from tiermem.core.types import (
    ConfidenceName,
    EpisodeTypeName,
    ImportanceName,
    MemoryTier,
    OutcomeName,
    SentimentName,
)
from tiermem.usecases.base import describe_validation_error

if TYPE_CHECKING:
    from tiermem.container import MemorySystem

logger = logging.getLogger(__name__)

STATUS_BY_CODE = {
    "VALIDATION_ERROR": 400,
    "NOT_FOUND": 404,
}


def status_code_for(error: DomainError) -> int:
    """Map a domain error to an HTTP-style status code."""
    return STATUS_BY_CODE.get(error.code, 500)


class ActionParams(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)


class AddFactParams(ActionParams):
    category: str
    fact: str
    source: str


class AddPreferenceParams(ActionParams):
    category: str
    key: str
    value: str
    confidence: ConfidenceName


class AddPatternParams(ActionParams):
    type: str
    description: str
    trigger: str
    outcome: str
    recommendation: str


class AddRuleParams(ActionParams):
    description: str
    domain: str
    action: str
    confidence: ConfidenceName


class RecordEpisodeParams(ActionParams):
    type: EpisodeTypeName
    description: str
    data: dict[str, Any] = Field(default_factory=dict)
    tags: list[str]
    importance: ImportanceName | None = None


class RecordFeedbackParams(ActionParams):
    source: str
    sentiment: SentimentName
    content: str
    task_id: str | None = Field(default=None, alias="taskId")


class RecordTaskResultParams(ActionParams):
    task_id: str = Field(alias="taskId")
    description: str
    outcome: OutcomeName
    data: dict[str, Any] = Field(default_factory=dict)


class StartSessionParams(ActionParams):
    task: str
    objective: str


class UpdateSessionParams(ActionParams):
    intermediate_results: dict[str, Any] = Field(
        default_factory=dict, alias="intermediateResults"
    )
    scratchpad: dict[str, str] = Field(default_factory=dict)
    attention_focus: str | None = Field(default=None, alias="attentionFocus")


class QueryParams(ActionParams):
    types: list[MemoryTier] | None = None
    tags: list[str] | None = None
    category: str | None = None
    limit: int | None = Field(default=None, ge=0)


class TaskContextParams(ActionParams):
    task_type: str = Field(alias="taskType")


class CreateProfileParams(ActionParams):
    name: str
    sector: str
    description: str
    target: str
    brand_tone: str = Field(alias="brandTone")


class LinkDiscoveryParams(ActionParams):
    discovery_id: str = Field(alias="discoveryId")


class EmptyParams(ActionParams):
    pass


class MemoryActionDispatcher:
    """Routes named actions to the use cases of a memory system.

    Attributes:
        system: The wired memory system whose use cases are invoked.
    """

    def __init__(self, system: "MemorySystem"):
        self.system = system
        self._handlers: dict[str, tuple[type[ActionParams], Callable[[Any], Result[Any]]]] = {
            "addFact": (AddFactParams, self._add_fact),
            "addPreference": (AddPreferenceParams, self._add_preference),
            "addPattern": (AddPatternParams, self._add_pattern),
            "addRule": (AddRuleParams, self._add_rule),
            "recordEpisode": (RecordEpisodeParams, self._record_episode),
            "recordFeedback": (RecordFeedbackParams, self._record_feedback),
            "recordTaskResult": (RecordTaskResultParams, self._record_task_result),
            "startSession": (StartSessionParams, self._start_session),
            "updateSession": (UpdateSessionParams, self._update_session),
            "query": (QueryParams, self._query),
            "taskContext": (TaskContextParams, self._task_context),
            "consolidate": (EmptyParams, self._consolidate),
            "createProfile": (CreateProfileParams, self._create_profile),
            "getProfile": (EmptyParams, self._get_profile),
            "linkDiscovery": (LinkDiscoveryParams, self._link_discovery),
        }

    @property
    def actions(self) -> list[str]:
        return list(self._handlers)

    def params_model(self, action: str) -> type[ActionParams]:
        """Parameter model of ``action``.

        Raises:
            ValidationError: If the action is unknown.
        """
        entry = self._handlers.get(action)
        if entry is None:
            raise ValidationError(f"Unknown action: {action}")
        return entry[0]

    def dispatch(self, action: str, params: Mapping[str, Any] | None = None) -> Result[Any]:
        """Validate ``params`` and run the use case named by ``action``.

        Args:
            action: Action discriminator, e.g. ``recordEpisode``.
            params: Raw action parameters.

        Returns:
            The use case's Result; a failed ``VALIDATION_ERROR`` Result for an
            unknown action or malformed parameters.
        """
        entry = self._handlers.get(action)
        if entry is None:
            logger.debug(f"Unknown action '{action}'")
            return Result.fail(ValidationError(f"Unknown action: {action}"))

        params_model, handler = entry
        try:
            parsed = params_model.model_validate(dict(params or {}))
        except PydanticValidationError as e:
            return Result.fail(
                ValidationError(f"Invalid params for {action}: {describe_validation_error(e)}")
            )

        logger.debug(f"Dispatching {action}")
        return handler(parsed)

    # ========== Handlers ==========

    def _add_fact(self, p: AddFactParams) -> Result[Any]:
        return self.system.add_client_fact.execute(p.category, p.fact, p.source)

    def _add_preference(self, p: AddPreferenceParams) -> Result[Any]:
        return self.system.add_preference.execute(p.category, p.key, p.value, p.confidence)

    def _add_pattern(self, p: AddPatternParams) -> Result[Any]:
        return self.system.add_validated_pattern.execute(
            p.type, p.description, p.trigger, p.outcome, p.recommendation
        )

    def _add_rule(self, p: AddRuleParams) -> Result[Any]:
        return self.system.add_learned_rule.execute(
            p.description, p.domain, p.action, p.confidence
        )

    def _record_episode(self, p: RecordEpisodeParams) -> Result[Any]:
        return self.system.record_episode.execute(
            p.type, p.description, p.data, p.tags, p.importance
        )

    def _record_feedback(self, p: RecordFeedbackParams) -> Result[Any]:
        return self.system.record_feedback.execute(p.source, p.sentiment, p.content, p.task_id)

    def _record_task_result(self, p: RecordTaskResultParams) -> Result[Any]:
        return self.system.record_task_result.execute(
            p.task_id, p.description, p.outcome, p.data
        )

    def _start_session(self, p: StartSessionParams) -> Result[Any]:
        return self.system.start_session.execute(p.task, p.objective)

    def _update_session(self, p: UpdateSessionParams) -> Result[Any]:
        return self.system.update_session.execute(
            p.intermediate_results, p.scratchpad, p.attention_focus
        )

    def _query(self, p: QueryParams) -> Result[Any]:
        return self.system.query_memory.execute(p.types, p.tags, p.category, p.limit)

    def _task_context(self, p: TaskContextParams) -> Result[Any]:
        return self.system.get_task_context.execute(p.task_type)

    def _consolidate(self, p: EmptyParams) -> Result[Any]:
        return self.system.consolidate_memory.execute()

    def _create_profile(self, p: CreateProfileParams) -> Result[Any]:
        return self.system.create_profile.execute(
            p.name, p.sector, p.description, p.target, p.brand_tone
        )

    def _get_profile(self, p: EmptyParams) -> Result[Any]:
        return self.system.get_profile.execute(required=True)

    def _link_discovery(self, p: LinkDiscoveryParams) -> Result[Any]:
        return self.system.link_discovery.execute(p.discovery_id)
