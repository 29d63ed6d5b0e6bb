import copy
import json
import os

os.environ.setdefault("OPENAI_API_KEY", "test-key")

import pytest

from promptgen.errors import UpstreamError


def make_envelope(output, task_state="ok", assumptions=None, errors=None, **overrides):
    envelope = {
        "schema_version": "1.0.0",
        "task_state": task_state,
        "summary": f"stage finished with {task_state}",
        "output": copy.deepcopy(output),
        "assumptions": assumptions or [],
        "next_actions": [
            {"action": "review_output", "priority": "medium", "parameters": {"owner": "user", "days": 2}}
        ],
        "warnings": ["persona-only warning"] if "expert_profile" in output else [],
        "errors": errors or [],
    }
    envelope.update(overrides)
    return envelope


EXPERT_PROFILE = {
    "name": "Dr. Mara Lindqvist",
    "title": "Principal Database Performance Engineer",
    "education": [{"degree_or_certification": "PhD Computer Science", "institution": "KTH"}],
    "experience": {"years": 14, "specialization": "PostgreSQL query planning"},
    "methodology": "Measure, isolate, index, verify",
    "notable_achievements": ["Cut p99 latency by 80% at a payments processor"],
    "guiding_principles": ["Never optimize without a baseline"],
}

ANALYSIS = {
    "initial_assessment": "Slow queries stem from missing composite indexes.",
    "step_by_step_recommendations": ["Capture EXPLAIN ANALYZE output"],
    "tactics": ["Add composite index on (tenant_id, created_at)"],
    "metrics": ["p99 query latency"],
    "pitfalls_to_avoid": ["Indexing every column"],
}

OPTIMIZED = {
    "optimized_prompt": "You are a PostgreSQL performance engineer...",
    "recommended_system_prompt": "Answer as a senior DBA.",
    "clarifying_questions": [],
}


def expert_envelope(**kwargs):
    return make_envelope({"expert_profile": EXPERT_PROFILE}, **kwargs)


def methodology_envelope(**kwargs):
    return make_envelope({"analysis": ANALYSIS}, **kwargs)


def optimized_envelope(**kwargs):
    return make_envelope(OPTIMIZED, **kwargs)


class FakeCompletionClient:
    """Returns canned text keyed by schema name and records every call."""

    def __init__(self, responses=None, failures=None):
        self.responses = responses or {}
        self.failures = failures or {}
        self.calls = []

    def calls_for(self, name):
        return [c for c in self.calls if c["schema"] == name]

    async def complete(self, system_instruction, user_instruction, schema=None, temperature=None):
        name = schema.name if schema is not None else None
        self.calls.append({
            "schema": name,
            "system": system_instruction,
            "user": user_instruction,
            "temperature": temperature,
        })
        if name in self.failures:
            raise self.failures[name]
        response = self.responses[name]
        if callable(response):
            return response(user_instruction)
        return response


@pytest.fixture
def canned_texts():
    return {
        "expert_design_response": json.dumps(expert_envelope()),
        "methodology_execution_response": json.dumps(methodology_envelope()),
        "optimized_prompt_response": json.dumps(optimized_envelope()),
    }


@pytest.fixture
def fake_client(canned_texts):
    return FakeCompletionClient(dict(canned_texts))


@pytest.fixture
def transport_error():
    return UpstreamError("OpenAI API Error: ConnectError('connection refused')")
