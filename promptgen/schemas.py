from pydantic import BaseModel
from typing import Optional

class PromptRequest(BaseModel):
    problem: str = ""

class PromptGenerationDetails(BaseModel):
    analysis: str = ""
    context: str = ""

class PromptResponse(BaseModel):
    success: bool
    optimizedPrompt: Optional[str] = None
    details: Optional[PromptGenerationDetails] = None
    error: Optional[str] = None

class ExpertDetails(BaseModel):
    expertDesign: str
    methodologyExecution: str
    optimizedResponse: str

class ExpertData(BaseModel):
    optimizedPrompt: str
    details: ExpertDetails

class ExpertPromptResponse(BaseModel):
    success: bool
    data: ExpertData
