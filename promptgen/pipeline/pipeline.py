from typing import NamedTuple, Optional

from loguru import logger

from promptgen.errors import InvalidInput
from promptgen.llm.clients import CompletionClient
from promptgen.pipeline.codec import DecodedEnvelope
from promptgen.pipeline.stage_def import PipelineStage
from promptgen.stages import runners


class PipelineResult(NamedTuple):
    expert_design: str
    methodology_execution: str
    optimized_prompt: str


def require_problem(problem: Optional[str]) -> str:
    if problem is None or not problem.strip():
        raise InvalidInput("Problem cannot be empty")
    return problem


class ExpertPromptPipeline:
    """Persona design -> methodology execution -> prompt optimization.

    Any PipelineError aborts the run. A persona that is not ``ok`` does not
    abort: the methodology stage is skipped and replaced by a blocked
    envelope, and the optimizer still runs so it can ask for clarification.
    """

    def __init__(self, client: CompletionClient):
        self.client = client

    async def run(self, problem: str) -> PipelineResult:
        problem = require_problem(problem)

        expert: Optional[DecodedEnvelope] = None
        methodology: Optional[DecodedEnvelope] = None
        optimized: Optional[DecodedEnvelope] = None

        state = PipelineStage.PERSONA
        while state is not PipelineStage.DONE:
            logger.info(f"stage: {state.value}")
            if state is PipelineStage.PERSONA:
                expert = await runners.design_expert(self.client, problem)
                state = PipelineStage.METHODOLOGY
            elif state is PipelineStage.METHODOLOGY:
                if expert.envelope.task_state != "ok":
                    logger.info(f"persona task_state={expert.envelope.task_state}, skipping methodology call")
                    methodology = runners.blocked_methodology(expert.envelope)
                else:
                    methodology = await runners.execute_methodology(self.client, problem, expert.envelope)
                state = PipelineStage.OPTIMIZE
            elif state is PipelineStage.OPTIMIZE:
                optimized = await runners.optimize_prompt(self.client, problem, expert.text, methodology.text)
                state = PipelineStage.DONE

        logger.info(
            "pipeline complete",
            persona=expert.envelope.task_state,
            methodology=methodology.envelope.task_state,
            optimized=optimized.envelope.task_state,
        )
        return PipelineResult(expert.text, methodology.text, optimized.text)
