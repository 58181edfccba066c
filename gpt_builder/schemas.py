from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict


class DocumentData(BaseModel):
    fileName: str
    chunkCount: int
    processed: bool


class AssistantOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: str
    instructions: str
    document_data: Optional[DocumentData] = None
    status: str = "active"
    created_at: datetime


class AssistantListResponse(BaseModel):
    gpts: List[AssistantOut]


class AssistantResponse(BaseModel):
    gpt: AssistantOut


class CreateResponse(BaseModel):
    success: bool = True
    gptId: str
    message: str = "GPT created successfully"


class DeleteResponse(BaseModel):
    success: bool = True


class Message(BaseModel):
    role: Literal["user", "assistant"]
    content: str


class ChatRequest(BaseModel):
    message: str
    history: Optional[List[Message]] = None


class ChatResponse(BaseModel):
    response: str
