"""Canonical stage envelopes and the versioned schema registry.

Every stage of the expert pipeline emits one envelope. The models below are
the single declaration of each envelope shape: the registry exports them as
JSON Schema for the completion request and the codec validates model output
against the same classes.
"""
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Dict, Literal, Tuple, Type

from pydantic import BaseModel, ConfigDict, model_validator

SCHEMA_VERSION = "1.0.0"

TaskState = Literal["ok", "needs_clarification", "blocked"]
Priority = Literal["low", "medium", "high"]


class CanonicalModel(BaseModel):
    # closed objects, no coercion, immutable once built (sequences are tuples)
    model_config = ConfigDict(extra="forbid", strict=True, frozen=True)


class NextAction(CanonicalModel):
    action: str
    priority: Priority
    parameters: Dict[str, Any]


class EducationItem(CanonicalModel):
    degree_or_certification: str
    institution: str


class Experience(CanonicalModel):
    years: float
    specialization: str


class ExpertProfile(CanonicalModel):
    name: str
    title: str
    education: Tuple[EducationItem, ...]
    experience: Experience
    methodology: str
    notable_achievements: Tuple[str, ...]
    guiding_principles: Tuple[str, ...]


class ExpertDesignOutput(CanonicalModel):
    expert_profile: ExpertProfile


class MethodologyAnalysis(CanonicalModel):
    initial_assessment: str
    step_by_step_recommendations: Tuple[str, ...]
    tactics: Tuple[str, ...]
    metrics: Tuple[str, ...]
    pitfalls_to_avoid: Tuple[str, ...]


class MethodologyExecutionOutput(CanonicalModel):
    analysis: MethodologyAnalysis


class OptimizedPromptOutput(CanonicalModel):
    optimized_prompt: str
    recommended_system_prompt: str
    clarifying_questions: Tuple[str, ...]


class StageEnvelope(CanonicalModel):
    """Shared scaffolding. Subclasses narrow ``output`` to the stage payload."""

    schema_version: str
    task_state: TaskState
    summary: str
    output: Any
    assumptions: Tuple[str, ...]
    next_actions: Tuple[NextAction, ...]
    warnings: Tuple[str, ...]
    errors: Tuple[str, ...]

    @model_validator(mode="after")
    def _errors_only_when_blocked(self):
        if self.task_state == "blocked" and not self.errors:
            raise ValueError("task_state 'blocked' requires at least one entry in errors")
        if self.task_state != "blocked" and self.errors:
            raise ValueError(f"errors must be empty unless task_state is 'blocked' (got '{self.task_state}')")
        return self


class ExpertDesignEnvelope(StageEnvelope):
    output: ExpertDesignOutput


class MethodologyExecutionEnvelope(StageEnvelope):
    output: MethodologyExecutionOutput


class OptimizedPromptEnvelope(StageEnvelope):
    output: OptimizedPromptOutput


@dataclass(frozen=True)
class SchemaId:
    name: str
    version: str = SCHEMA_VERSION

    def __str__(self):
        return f"{self.name}@{self.version}"


EXPERT_DESIGN = SchemaId("expert_design_response")
METHODOLOGY_EXECUTION = SchemaId("methodology_execution_response")
OPTIMIZED_PROMPT = SchemaId("optimized_prompt_response")

SCHEMA_REGISTRY: Dict[SchemaId, Type[StageEnvelope]] = {
    EXPERT_DESIGN: ExpertDesignEnvelope,
    METHODOLOGY_EXECUTION: MethodologyExecutionEnvelope,
    OPTIMIZED_PROMPT: OptimizedPromptEnvelope,
}


def envelope_model(schema_id: SchemaId) -> Type[StageEnvelope]:
    try:
        return SCHEMA_REGISTRY[schema_id]
    except KeyError:
        raise KeyError(f"no envelope schema registered for {schema_id}") from None


@lru_cache(maxsize=None)
def json_schema(schema_id: SchemaId) -> Dict[str, Any]:
    """JSON Schema document for ``schema_id``, as sent to the completion service."""
    return envelope_model(schema_id).model_json_schema()
