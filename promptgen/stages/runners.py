from loguru import logger

from promptgen.llm.clients import CompletionClient
from promptgen.pipeline import codec
from promptgen.pipeline.codec import DecodedEnvelope
from promptgen.pipeline.envelopes import (
    EXPERT_DESIGN,
    METHODOLOGY_EXECUTION,
    OPTIMIZED_PROMPT,
    SCHEMA_VERSION,
    ExpertDesignEnvelope,
    MethodologyAnalysis,
    MethodologyExecutionEnvelope,
    MethodologyExecutionOutput,
)
from promptgen.pipeline.stage_def import Stage
from promptgen.stages import prompts

# Each runner builds one user instruction, makes one completion call and
# decodes the reply. Runners never modify the envelopes they are given.

PERSONA_DESIGNER = Stage("persona_designer", prompts.EXPERT_DESIGNER_SYSTEM_PROMPT, EXPERT_DESIGN)
METHODOLOGY_EXECUTOR = Stage("methodology_executor", prompts.METHODOLOGY_EXECUTOR_SYSTEM_PROMPT, METHODOLOGY_EXECUTION)
PROMPT_OPTIMIZER = Stage("prompt_optimizer", prompts.PROMPT_OPTIMIZER_SYSTEM_PROMPT, OPTIMIZED_PROMPT)

BLOCKED_SUMMARY = "Cannot apply expertise because expert design did not complete successfully."


async def run_stage(client: CompletionClient, stage: Stage, user_instruction: str) -> DecodedEnvelope:
    logger.info(f"stage {stage.name} calling completion service")
    raw = await client.complete(stage.system_prompt, user_instruction, schema=stage.schema, temperature=stage.temperature)
    logger.debug("stage raw output", stage=stage.name, chars=len(raw))
    decoded = codec.decode(raw, stage.schema)
    logger.info(f"stage {stage.name} task_state={decoded.envelope.task_state}")
    return decoded


async def design_expert(client: CompletionClient, problem: str) -> DecodedEnvelope:
    user_instruction = prompts.EXPERT_DESIGN_USER_TEMPLATE.format(problem=problem)
    return await run_stage(client, PERSONA_DESIGNER, user_instruction)


def methodology_instruction(problem: str, expert: ExpertDesignEnvelope) -> str:
    # only the profile travels downstream, never the rest of the persona envelope
    profile_json = expert.output.expert_profile.model_dump_json(indent=2)
    return prompts.METHODOLOGY_USER_TEMPLATE.format(problem=problem, expert_profile_json=profile_json)


async def execute_methodology(client: CompletionClient, problem: str, expert: ExpertDesignEnvelope) -> DecodedEnvelope:
    return await run_stage(client, METHODOLOGY_EXECUTOR, methodology_instruction(problem, expert))


def blocked_methodology(expert: ExpertDesignEnvelope) -> DecodedEnvelope:
    """Local stand-in for the methodology stage when the persona is not usable.

    The analysis carries empty placeholders so the envelope still satisfies
    the methodology schema.
    """
    envelope = MethodologyExecutionEnvelope(
        schema_version=SCHEMA_VERSION,
        task_state="blocked",
        summary=BLOCKED_SUMMARY,
        output=MethodologyExecutionOutput(
            analysis=MethodologyAnalysis(
                initial_assessment="",
                step_by_step_recommendations=(),
                tactics=(),
                metrics=(),
                pitfalls_to_avoid=(),
            )
        ),
        assumptions=expert.assumptions,
        next_actions=(),
        warnings=(),
        errors=(f"Step1 task_state={expert.task_state}. Resolve Step1 first.",),
    )
    return DecodedEnvelope(envelope, codec.encode(envelope))


def optimizer_instruction(problem: str, expert_json: str, methodology_json: str) -> str:
    return prompts.OPTIMIZER_USER_TEMPLATE.format(
        problem=problem,
        expert_design_json=expert_json,
        methodology_execution_json=methodology_json,
    )


async def optimize_prompt(client: CompletionClient, problem: str, expert_json: str, methodology_json: str) -> DecodedEnvelope:
    return await run_stage(client, PROMPT_OPTIMIZER, optimizer_instruction(problem, expert_json, methodology_json))
