from dataclasses import dataclass
from enum import Enum
from typing import Optional

from promptgen.pipeline.envelopes import SchemaId


class PipelineStage(str, Enum):
    PERSONA = "persona"
    METHODOLOGY = "methodology"
    OPTIMIZE = "optimize"
    DONE = "done"


@dataclass(frozen=True)
class Stage:
    name: str
    system_prompt: str
    schema: Optional[SchemaId] = None  # None: free-text stage
    temperature: Optional[float] = None
