# tests/test_rewriter.py
"""Tests for standalone query rewriting."""

import asyncio

import pytest

from docent.exceptions import RewriteFailure
from docent.models import Message
from docent.rewriter import QueryRewriter


class TestPassThrough:
    @pytest.mark.asyncio
    async def test_first_turn_is_not_rewritten(self, llm):
        """Test that a single message is returned verbatim without a model call."""
        outcome = await QueryRewriter(llm).rewrite([Message.user("Hello")])

        assert outcome.query == "Hello"
        assert not outcome.rewritten
        assert llm.calls == []

    @pytest.mark.asyncio
    async def test_log_ending_with_assistant_passes_through(self, llm):
        log = [Message.user("hi"), Message.assistant("hello there")]

        outcome = await QueryRewriter(llm).rewrite(log)

        assert outcome.query == "hello there"
        assert llm.calls == []

    @pytest.mark.asyncio
    async def test_empty_log(self, llm):
        outcome = await QueryRewriter(llm).rewrite([])
        assert outcome.query == ""
        assert llm.calls == []


class TestRewrite:
    @pytest.mark.asyncio
    async def test_follow_up_is_rewritten(self, make_llm):
        """Test that a follow-up question becomes a standalone query."""
        llm = make_llm(completions=["  What is the annual leave policy for contractors?  "])
        log = [
            Message.user("What is the annual leave policy?"),
            Message.assistant("Employees get 25 days."),
            Message.user("And for contractors?"),
        ]

        outcome = await QueryRewriter(llm).rewrite(log)

        assert outcome.rewritten
        assert outcome.query == "What is the annual leave policy for contractors?"
        assert outcome.warning is None

    @pytest.mark.asyncio
    async def test_only_recent_window_is_sent(self, make_llm):
        """Test that the instruction plus the last `window` messages are sent."""
        llm = make_llm(completions=["query"])
        log = [Message.user(f"m{i}") for i in range(6)]

        await QueryRewriter(llm, window=3).rewrite(log)

        sent = llm.calls[0]
        assert sent[0]["role"] == "system"
        assert [m["content"] for m in sent[1:]] == ["m3", "m4", "m5"]

    @pytest.mark.asyncio
    async def test_summary_sent_as_system_message(self, make_llm):
        from docent.models import Role

        llm = make_llm(completions=["query"])
        log = [Message(role=Role.SUMMARY, content="earlier"), Message.user("and then?")]

        await QueryRewriter(llm).rewrite(log)

        assert llm.calls[0][1]["role"] == "system"
        assert "earlier" in llm.calls[0][1]["content"]


class TestFallback:
    @pytest.mark.asyncio
    async def test_failure_falls_back_to_literal(self, make_llm):
        """Test that a provider error yields the literal text and a warning."""
        llm = make_llm(completions=[RuntimeError("boom")])
        log = [Message.user("a"), Message.assistant("b"), Message.user("literal question")]

        outcome = await QueryRewriter(llm).rewrite(log)

        assert outcome.query == "literal question"
        assert not outcome.rewritten
        assert isinstance(outcome.warning, RewriteFailure)

    @pytest.mark.asyncio
    async def test_empty_rewrite_falls_back(self, make_llm):
        llm = make_llm(completions=["   "])
        log = [Message.user("a"), Message.assistant("b"), Message.user("literal")]

        outcome = await QueryRewriter(llm).rewrite(log)

        assert outcome.query == "literal"
        assert outcome.warning is not None

    @pytest.mark.asyncio
    async def test_timeout_falls_back(self, llm):
        class SlowLLM(type(llm)):
            async def acomplete(self, messages, temperature=None):
                await asyncio.sleep(10)
                return "late"

        log = [Message.user("a"), Message.assistant("b"), Message.user("literal")]

        outcome = await QueryRewriter(SlowLLM(), timeout=0.01).rewrite(log)

        assert outcome.query == "literal"
        assert outcome.warning is not None
