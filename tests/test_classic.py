import asyncio

import pytest

from promptgen.errors import InvalidInput, UpstreamError
from promptgen.pipeline.classic import ClassicPromptPipeline, ClassicResult
from conftest import FakeCompletionClient


class SequenceClient(FakeCompletionClient):
    def __init__(self, replies, fail_at=None):
        super().__init__()
        self.replies = list(replies)
        self.fail_at = fail_at

    async def complete(self, system_instruction, user_instruction, schema=None, temperature=None):
        self.calls.append({"schema": schema, "system": system_instruction, "user": user_instruction, "temperature": temperature})
        if self.fail_at == len(self.calls):
            raise UpstreamError("OpenAI API returned 500: boom", status_code=500)
        return self.replies[len(self.calls) - 1]


class TestClassicPipeline:

    def test_stages_chain_free_text(self):
        client = SequenceClient(["- core: slow queries", "Use EXPLAIN ANALYZE", "Act as a DBA..."])
        result = asyncio.run(ClassicPromptPipeline(client).run("Slow queries"))

        assert result == ClassicResult("- core: slow queries", "Use EXPLAIN ANALYZE", "Act as a DBA...")
        assert client.calls[0]["user"] == "Analyze this problem: Slow queries"
        assert "Analysis: - core: slow queries" in client.calls[1]["user"]
        assert "Context: Use EXPLAIN ANALYZE" in client.calls[2]["user"]
        assert all(c["schema"] is None for c in client.calls)
        assert all(c["temperature"] == 0.7 for c in client.calls)

    def test_blank_problem(self):
        client = SequenceClient([])
        with pytest.raises(InvalidInput):
            asyncio.run(ClassicPromptPipeline(client).run("  "))
        assert client.calls == []

    def test_upstream_failure_stops_the_chain(self):
        client = SequenceClient(["analysis", "context", "prompt"], fail_at=2)
        with pytest.raises(UpstreamError):
            asyncio.run(ClassicPromptPipeline(client).run("Slow queries"))
        assert len(client.calls) == 2
