"""
Scenario tests for the TicketAgent pipeline

The model, the store and the search backend are doubles; everything else
runs through the compiled LangGraph workflow.
"""
import json

import pytest

from ticketdesk.agents.errors import (
    AuthorizationError,
    ExecutionError,
    InterpreterError,
    ProtocolError,
    TicketNotFoundError,
)
from ticketdesk.agents.orchestrator import TicketAgent
from ticketdesk.models.schemas import ActionType, AgentMode, AgentRequest, UserRole


def raw(actions, message="Done."):
    return json.dumps({"actions": actions, "message": message})


def make_request(instruction, ticket_id="ticket-1", role=UserRole.SUPPORT):
    return AgentRequest(ticket_id=ticket_id, instruction=instruction, user_role=role, user_id="agent-1")


@pytest.fixture
def agent(settings, repository, llm, search):
    return TicketAgent(settings, repository=repository, llm=llm, search=search)


class TestScopedScenarios:

    @pytest.mark.asyncio
    async def test_mark_urgent_and_close(self, agent, repository, llm):
        llm.chat.return_value = raw(
            [{"type": "priority", "value": "urgent"}, {"type": "close"}],
            "Marked urgent and closed."
        )

        reply = await agent.run(make_request("mark this urgent and close it"))

        assert reply.message == "Marked urgent and closed."
        assert reply.mode == AgentMode.SCOPED
        assert reply.actions == [ActionType.PRIORITY, ActionType.CLOSE]
        assert repository.tickets["ticket-1"]["priority"] == "urgent"
        assert repository.tickets["ticket-1"]["status"] == "closed"

    @pytest.mark.asyncio
    async def test_summarize(self, agent, repository, llm):
        llm.chat.side_effect = [
            raw([{"type": "summary"}], "Summary added."),
            "Customer locked out after password reset; engineering investigating.",
        ]
        before = len(repository.messages)

        reply = await agent.run(make_request("summarize this ticket"))

        assert reply.actions == [ActionType.SUMMARY]
        assert len(repository.messages) == before + 1
        new_message = repository.messages[-1]
        assert new_message["is_internal"] and new_message["is_system"]
        assert repository.tickets["ticket-1"]["ai_summary"]

    @pytest.mark.asyncio
    async def test_prompt_carries_ticket_and_context(self, agent, llm, search):
        search.search_similar.return_value = [
            {"id": "d1", "content": "Reset guide", "filename": "reset.md", "similarity": 0.88},
        ]

        await agent.run(make_request("what should I do next?"))

        messages = llm.chat.call_args_list[0].args[0]
        assert "Cannot login" in messages[1]["content"]
        assert "reset.md" in messages[1]["content"]
        assert llm.chat.call_args_list[0].kwargs["temperature"] == 0.0

    @pytest.mark.asyncio
    async def test_no_actions(self, agent, repository, llm):
        llm.chat.return_value = raw([], "This ticket looks fine as it is.")

        reply = await agent.run(make_request("anything to do here?"))

        assert reply.actions == []
        assert reply.message == "This ticket looks fine as it is."
        assert repository.writes == []


class TestGeneralMode:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("ticket_id", ["general", None])
    async def test_never_executes(self, agent, repository, llm, search, ticket_id):
        llm.chat.return_value = raw(
            [{"type": "status", "value": "closed"}, {"type": "priority", "value": "urgent"}],
            "You could close stale tickets."
        )

        reply = await agent.run(make_request("close all old tickets", ticket_id=ticket_id))

        assert reply.mode == AgentMode.GENERAL
        assert reply.actions == []
        assert reply.message == "You could close stale tickets."
        assert repository.writes == []
        assert repository.tickets["ticket-1"]["status"] == "open"
        search.get_ticket_documents.assert_not_called()
        assert search.search_similar.call_args.kwargs["ticket_id"] is None

    @pytest.mark.asyncio
    async def test_no_ticket_fetch(self, agent, repository, llm):
        repository.fail_on["get_ticket"] = AssertionError("ticket fetched in general mode")

        reply = await agent.run(make_request("how do refunds work?", ticket_id="general"))

        assert reply.mode == AgentMode.GENERAL


class TestFailures:

    @pytest.mark.asyncio
    async def test_customer_rejected_before_any_work(self, agent, repository, llm, search):
        with pytest.raises(AuthorizationError):
            await agent.run(make_request("close it", role=UserRole.CUSTOMER))

        llm.chat.assert_not_awaited()
        search.search_similar.assert_not_called()
        assert repository.writes == []

    @pytest.mark.asyncio
    async def test_prose_wrapped_output(self, agent, repository, llm):
        llm.chat.return_value = "Sure, here you go: " + raw([{"type": "close"}])

        with pytest.raises(ProtocolError):
            await agent.run(make_request("close it"))

        assert repository.writes == []

    @pytest.mark.asyncio
    async def test_invalid_status_leaves_ticket_unchanged(self, agent, repository, llm):
        llm.chat.return_value = raw([{"type": "status", "value": "archived"}])

        with pytest.raises(ProtocolError):
            await agent.run(make_request("archive this"))

        assert repository.tickets["ticket-1"]["status"] == "open"

    @pytest.mark.asyncio
    async def test_one_invalid_among_valid_executes_nothing(self, agent, repository, llm):
        llm.chat.return_value = raw([
            {"type": "priority", "value": "high"},
            {"type": "tags", "tags": ["billing"]},
            {"type": "post_note"},
        ])

        with pytest.raises(ProtocolError):
            await agent.run(make_request("triage this"))

        assert repository.writes == []

    @pytest.mark.asyncio
    async def test_model_failure(self, agent, repository, llm):
        llm.chat.side_effect = TimeoutError("upstream timeout")

        with pytest.raises(InterpreterError):
            await agent.run(make_request("close it"))

        assert repository.writes == []

    @pytest.mark.asyncio
    async def test_unknown_ticket(self, agent, llm):
        with pytest.raises(TicketNotFoundError):
            await agent.run(make_request("close it", ticket_id="ticket-404"))

        llm.chat.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_execution_failure_keeps_earlier_actions(self, agent, repository, llm):
        llm.chat.return_value = raw([
            {"type": "priority", "value": "urgent"},
            {"type": "post_note", "note": "Escalated"},
            {"type": "close"},
        ])
        repository.fail_on["add_message"] = RuntimeError("insert failed")

        with pytest.raises(ExecutionError) as exc_info:
            await agent.run(make_request("escalate and close"))

        assert exc_info.value.applied == ["priority"]
        assert repository.tickets["ticket-1"]["priority"] == "urgent"
        assert repository.tickets["ticket-1"]["status"] == "open"

    @pytest.mark.asyncio
    async def test_retrieval_failure_is_not_fatal(self, agent, llm):
        llm.generate_embedding.side_effect = RuntimeError("embedding quota exceeded")
        llm.chat.return_value = raw([], "Proceeding without documents.")

        reply = await agent.run(make_request("anything relevant?"))

        assert reply.message == "Proceeding without documents."
