from typing import NamedTuple

from loguru import logger

from promptgen.llm.clients import CompletionClient
from promptgen.pipeline.pipeline import require_problem
from promptgen.pipeline.stage_def import Stage
from promptgen.stages import prompts

ANALYZE = Stage("analyze_problem", prompts.ANALYZE_SYSTEM_PROMPT, temperature=0.7)
ENRICH = Stage("enrich_context", prompts.ENRICH_SYSTEM_PROMPT, temperature=0.7)
GENERATE = Stage("generate_prompt", prompts.GENERATE_SYSTEM_PROMPT, temperature=0.7)


class ClassicResult(NamedTuple):
    analysis: str
    context: str
    optimized_prompt: str


class ClassicPromptPipeline:
    """Free-text analyze -> enrich -> generate pipeline, no envelopes."""

    def __init__(self, client: CompletionClient):
        self.client = client

    async def _call(self, stage: Stage, user_instruction: str) -> str:
        logger.info(f"stage: {stage.name}")
        return await self.client.complete(stage.system_prompt, user_instruction, temperature=stage.temperature)

    async def run(self, problem: str) -> ClassicResult:
        problem = require_problem(problem)
        analysis = await self._call(ANALYZE, prompts.ANALYZE_USER_TEMPLATE.format(problem=problem))
        context = await self._call(ENRICH, prompts.ENRICH_USER_TEMPLATE.format(problem=problem, analysis=analysis))
        optimized = await self._call(
            GENERATE,
            prompts.GENERATE_USER_TEMPLATE.format(problem=problem, analysis=analysis, context=context),
        )
        return ClassicResult(analysis, context, optimized)
