#  Agent Dashboard - Chat Service Tests
#
#  Sessions, message log ordering and the chat turn with a mocked model.
#
#  Depends on: dashboard/services/chat.py, tests/conftest.py
#  Used by:    pytest

from datetime import date

import pytest

from dashboard.services.chat import ChatService, estimate_tokens


@pytest.fixture
def chat(tmp_db, mock_llm):
    return ChatService(db=tmp_db, llm=mock_llm)


class TestEstimateTokens:
    @pytest.mark.parametrize("text,expected", [("", 0), ("abc", 1), ("abcd", 1), ("abcde", 2)])
    def test_quarter_length_rounded_up(self, text, expected):
        assert estimate_tokens(text) == expected


class TestSessions:
    async def test_create_returns_id_and_default_title(self, chat):
        session_id = await chat.create_session(7, "kimi-k2")
        session = await chat.get_session(session_id)
        assert session["user_id"] == 7
        assert session["model_used"] == "kimi-k2"
        assert session["title"] == f"Chat {date.today().isoformat()}"
        assert session["message_count"] == 0

    async def test_create_with_title(self, chat):
        session_id = await chat.create_session(7, "kimi-k2", "Planning")
        assert (await chat.get_session(session_id))["title"] == "Planning"

    async def test_list_sessions_newest_first_and_scoped(self, chat, tmp_db):
        await tmp_db.execute_write(
            "INSERT INTO chat_sessions (user_id, title, model_used, created_at) VALUES "
            "(1, 'old', 'm', 100.0), (1, 'new', 'm', 200.0), (2, 'other', 'm', 300.0)"
        )
        sessions = await chat.list_sessions(1)
        assert [s["title"] for s in sessions] == ["new", "old"]
        assert await chat.list_sessions(99) == []

    async def test_absent_session_returns_none(self, chat):
        assert await chat.get_session(404) is None


class TestMessages:
    async def test_add_message_writes_optional_fields_only_when_given(self, chat):
        session_id = await chat.create_session(1, "m")
        await chat.add_message(session_id, "system", "be brief")
        await chat.add_message(session_id, "assistant", "ok", model="m", tokens_used=3, cost=0.01)

        messages = await chat.list_messages(session_id)
        assert [m["role"] for m in messages] == ["system", "assistant"]
        assert messages[0]["model"] is None
        assert messages[0]["tokens_used"] is None
        assert messages[0]["metadata"] is None
        assert messages[1]["tokens_used"] == 3
        assert messages[1]["cost"] == 0.01

    async def test_add_message_rejects_unknown_role(self, chat):
        with pytest.raises(ValueError):
            await chat.add_message(1, "tool", "x")

    async def test_ties_on_created_at_ordered_by_id(self, chat, tmp_db):
        await tmp_db.execute_write(
            "INSERT INTO chat_messages (session_id, role, content, created_at) VALUES "
            "(1, 'user', 'first', 50.0), (1, 'assistant', 'second', 50.0), "
            "(1, 'user', 'earliest', 10.0)"
        )
        messages = await chat.list_messages(1)
        assert [m["content"] for m in messages] == ["earliest", "first", "second"]


class TestSendMessage:
    async def test_appends_user_then_assistant(self, chat, mock_llm):
        session_id = await chat.create_session(1, "kimi-k2")
        result = await chat.send_message(session_id, "hello", "kimi-k2")

        reply = mock_llm.invoke.return_value
        expected_tokens = estimate_tokens("hello") + estimate_tokens(reply)
        assert result == {"response": reply, "tokens_used": expected_tokens, "model": "kimi-k2"}

        messages = await chat.list_messages(session_id)
        assert [(m["role"], m["content"]) for m in messages] == [
            ("user", "hello"),
            ("assistant", reply),
        ]
        assert messages[0]["model"] == "kimi-k2"
        assert messages[0]["tokens_used"] is None
        assert messages[1]["model"] == "kimi-k2"
        assert messages[1]["tokens_used"] == expected_tokens

    async def test_history_sent_in_order_without_duplicate(self, chat, mock_llm):
        session_id = await chat.create_session(1, "m")
        await chat.add_message(session_id, "system", "be brief")
        await chat.add_message(session_id, "user", "hi")
        await chat.add_message(session_id, "assistant", "hello")

        await chat.send_message(session_id, "how are you?", "m")

        sent, model = mock_llm.invoke.call_args.args
        assert model == "m"
        assert sent == [
            {"role": "system", "content": "be brief"},
            {"role": "user", "content": "hi"},
            {"role": "assistant", "content": "hello"},
            {"role": "user", "content": "how are you?"},
        ]

    async def test_other_sessions_not_included(self, chat, mock_llm):
        a = await chat.create_session(1, "m")
        b = await chat.create_session(1, "m")
        await chat.add_message(a, "user", "in a")

        await chat.send_message(b, "in b", "m")

        sent, _ = mock_llm.invoke.call_args.args
        assert sent == [{"role": "user", "content": "in b"}]

    async def test_token_estimate(self, chat, mock_llm):
        mock_llm.invoke.return_value = "x" * 9
        session_id = await chat.create_session(1, "m")
        result = await chat.send_message(session_id, "y" * 5, "m")
        assert result["tokens_used"] == 2 + 3

    async def test_empty_reply(self, chat, mock_llm):
        mock_llm.invoke.return_value = ""
        session_id = await chat.create_session(1, "m")
        result = await chat.send_message(session_id, "abcd", "m")
        assert result["response"] == ""
        assert result["tokens_used"] == 1

    async def test_model_failure_keeps_user_message(self, chat, mock_llm):
        mock_llm.invoke.side_effect = RuntimeError("gateway down")
        session_id = await chat.create_session(1, "m")

        with pytest.raises(RuntimeError):
            await chat.send_message(session_id, "hello", "m")

        messages = await chat.list_messages(session_id)
        assert [m["role"] for m in messages] == ["user"]
