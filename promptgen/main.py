import asyncio
import datetime
import uvicorn
from fastapi import FastAPI, HTTPException, Depends
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from promptgen.config import settings
from promptgen.utils import configure_logging
from promptgen.schemas import PromptRequest, PromptResponse, PromptGenerationDetails, ExpertPromptResponse
from promptgen.errors import InvalidInput, UpstreamError, SchemaViolation
from promptgen.llm.clients import create_completion_client
from promptgen.pipeline.pipeline import ExpertPromptPipeline
from promptgen.pipeline.classic import ClassicPromptPipeline
from loguru import logger

API_BASE_PATH = "/api/v1"

configure_logging()
app = FastAPI(title=settings.APP_NAME)
app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])

completion_client = create_completion_client(settings)


def get_expert_pipeline() -> ExpertPromptPipeline:
    return ExpertPromptPipeline(completion_client)


def get_classic_pipeline() -> ClassicPromptPipeline:
    return ClassicPromptPipeline(completion_client)


def empty_problem_response() -> JSONResponse:
    body = PromptResponse(success=False, error="Problem cannot be empty")
    return JSONResponse(status_code=400, content=body.model_dump())


async def run_with_timeout(coro, title: str):
    try:
        return await asyncio.wait_for(coro, timeout=settings.PIPELINE_TIMEOUT_SECONDS)
    except asyncio.TimeoutError:
        logger.warning(f"{title}: pipeline timed out after {settings.PIPELINE_TIMEOUT_SECONDS}s")
        raise HTTPException(status_code=504, detail=f"{title}: timed out")
    except (UpstreamError, SchemaViolation) as e:
        logger.warning(f"{title}: {type(e).__name__}")
        raise HTTPException(status_code=502, detail=f"{title}: {e}")


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Closing completion client")
    await completion_client.aclose()


@app.post(API_BASE_PATH + "/generate-prompt", response_model=PromptResponse)
async def generate_prompt(req: PromptRequest, pipeline: ClassicPromptPipeline = Depends(get_classic_pipeline)):
    if not req.problem.strip():
        return empty_problem_response()
    try:
        result = await run_with_timeout(pipeline.run(req.problem), "Error generating prompt")
    except InvalidInput:
        return empty_problem_response()
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Prompt generation error")
        raise HTTPException(status_code=500, detail=str(e))
    return PromptResponse(
        success=True,
        optimizedPrompt=result.optimized_prompt,
        details=PromptGenerationDetails(analysis=result.analysis, context=result.context),
    )


@app.post(API_BASE_PATH + "/expert-generate-prompt", response_model=ExpertPromptResponse)
async def expert_generate_prompt(req: PromptRequest, pipeline: ExpertPromptPipeline = Depends(get_expert_pipeline)):
    if not req.problem.strip():
        return empty_problem_response()
    try:
        expert_json, methodology_json, optimized_json = await run_with_timeout(
            pipeline.run(req.problem), "Error generating expert prompt"
        )
    except InvalidInput:
        return empty_problem_response()
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Expert prompt generation error")
        raise HTTPException(status_code=500, detail=str(e))
    return {
        "success": True,
        "data": {
            "optimizedPrompt": optimized_json,
            "details": {
                "expertDesign": expert_json,
                "methodologyExecution": methodology_json,
                "optimizedResponse": optimized_json,
            },
        },
    }


@app.get(API_BASE_PATH + "/health")
async def health():
    return {"status": "healthy", "timestamp": datetime.datetime.now(datetime.timezone.utc).isoformat()}


if __name__ == "__main__":
    uvicorn.run("promptgen.main:app", host="0.0.0.0", port=8000, reload=False, log_config=None)
