"""Unit tests for the memory action dispatcher."""

import pytest

from tiermem.core.exceptions import ConsolidationError, NotFoundError, ValidationError
from tiermem.usecases.actions import status_code_for


@pytest.fixture
def dispatcher(system):
    return system.dispatcher()


class TestStatusCodes:
    """Test error code to status code mapping."""

    def test_mapping(self):
        assert status_code_for(ValidationError("bad")) == 400
        assert status_code_for(NotFoundError("CompanyProfile")) == 404
        assert status_code_for(ConsolidationError("pruning", "boom")) == 500


class TestDispatch:
    """Test routing and parameter validation."""

    def test_actions(self, dispatcher):
        assert "recordEpisode" in dispatcher.actions
        assert "linkDiscovery" in dispatcher.actions
        assert len(dispatcher.actions) == 15

    def test_unknown_action(self, dispatcher):
        result = dispatcher.dispatch("forget", {})

        assert result.is_err()
        assert result.error.message == "Unknown action: forget"
        assert status_code_for(result.error) == 400

    def test_params_model_unknown(self, dispatcher):
        with pytest.raises(ValidationError):
            dispatcher.params_model("forget")

    def test_missing_params(self, dispatcher):
        result = dispatcher.dispatch("addFact", {"category": "company"})

        assert result.is_err()
        assert result.error.message.startswith("Invalid params for addFact: ")
        assert "fact" in result.error.message

    def test_extra_params_rejected(self, dispatcher):
        result = dispatcher.dispatch(
            "addFact", {"category": "company", "fact": "B2B", "source": "call", "extra": 1}
        )
        assert result.is_err()

    def test_invalid_enum_value(self, dispatcher, system):
        result = dispatcher.dispatch(
            "recordEpisode", {"type": "meeting", "description": "Call", "tags": ["call"]}
        )
        assert result.error.code == "VALIDATION_ERROR"
        assert system.episodic.get_episodes() == []

    def test_domain_validation_surfaces(self, dispatcher):
        """Test invariants enforced by the aggregate come back as failures."""
        result = dispatcher.dispatch(
            "recordEpisode", {"type": "interaction", "description": "Call", "tags": []}
        )
        assert result.error.message == "Episode must have at least one tag"


class TestActions:
    """Test each action reaches its use case."""

    def test_memory_actions(self, dispatcher, system):
        assert dispatcher.dispatch(
            "addFact", {"category": "company", "fact": "B2B", "source": "call"}
        ).is_ok()
        assert dispatcher.dispatch(
            "addPreference",
            {"category": "style", "key": "tone", "value": "casual", "confidence": "low"},
        ).is_ok()
        assert dispatcher.dispatch(
            "addPattern",
            {
                "type": "blog",
                "description": "Lists work",
                "trigger": "t",
                "outcome": "o",
                "recommendation": "Use lists",
            },
        ).is_ok()
        assert dispatcher.dispatch(
            "addRule",
            {"description": "No jargon", "domain": "blog", "action": "Plain", "confidence": "low"},
        ).is_ok()
        assert dispatcher.dispatch(
            "recordEpisode",
            {"type": "interaction", "description": "Call", "tags": ["call"], "importance": "high"},
        ).is_ok()

        stats = system.query_service.get_stats()
        assert stats.semantic.facts == 1
        assert stats.semantic.preferences == 1
        assert stats.semantic.patterns == 1
        assert stats.semantic.rules == 1
        assert system.episodic.get_episodes()[0].importance == "high"

    def test_camel_case_aliases(self, dispatcher, system):
        feedback = dispatcher.dispatch(
            "recordFeedback",
            {"source": "client", "sentiment": "positive", "content": "Nice", "taskId": "t-1"},
        )
        result = dispatcher.dispatch(
            "recordTaskResult",
            {"taskId": "t-1", "description": "Post", "outcome": "success"},
        )

        assert feedback.value.task_id == "t-1"
        assert result.value.task_id == "t-1"

    def test_session_actions(self, dispatcher, system):
        dispatcher.dispatch("startSession", {"task": "Write post", "objective": "Signups"})
        result = dispatcher.dispatch(
            "updateSession",
            {"intermediateResults": {"outline": 3}, "attentionFocus": "intro"},
        )

        assert result.value.session.intermediate_results == {"outline": 3}
        assert system.working.session.attention_focus == "intro"

    def test_query_and_task_context(self, dispatcher):
        dispatcher.dispatch(
            "addRule",
            {"description": "No jargon", "domain": "blog", "action": "Plain", "confidence": "low"},
        )

        query = dispatcher.dispatch("query", {"types": ["semantic"], "category": "blog"})
        context = dispatcher.dispatch("taskContext", {"taskType": "blog"})

        assert len(query.value.memory.semantic.learned_rules) == 1
        assert len(context.value.rules) == 1

    def test_query_zero_limit(self, dispatcher):
        """Test a limit of 0 is accepted and means no limit."""
        for n in range(3):
            dispatcher.dispatch(
                "recordEpisode", {"type": "interaction", "description": f"Call {n}", "tags": ["call"]}
            )

        result = dispatcher.dispatch("query", {"types": ["episodic"], "limit": 0})

        assert result.is_ok()
        assert len(result.value.memory.episodic.episodes) == 3

    def test_query_negative_limit_rejected(self, dispatcher):
        result = dispatcher.dispatch("query", {"limit": -1})
        assert status_code_for(result.error) == 400

    def test_consolidate(self, dispatcher, system):
        dispatcher.dispatch("startSession", {"task": "Write post", "objective": "Signups"})
        dispatcher.dispatch("updateSession", {"scratchpad": {"tone": "casual"}})

        result = dispatcher.dispatch("consolidate")

        assert result.value.episodic.episodes == 1
        assert system.consolidate_memory.last_report.session_consolidated

    def test_profile_actions(self, dispatcher):
        missing = dispatcher.dispatch("getProfile", {})
        assert status_code_for(missing.error) == 404

        created = dispatcher.dispatch(
            "createProfile",
            {
                "name": "Acme Corp",
                "sector": "SaaS",
                "description": "Project management tool",
                "target": "Marketing teams",
                "brandTone": "Friendly",
            },
        )
        linked = dispatcher.dispatch("linkDiscovery", {"discoveryId": "discovery-1"})
        again = dispatcher.dispatch("linkDiscovery", {"discoveryId": "discovery-2"})

        assert created.is_ok()
        assert linked.value.discovery_id == "discovery-1"
        assert status_code_for(again.error) == 400
        assert dispatcher.dispatch("getProfile").value.discovery_id == "discovery-1"
