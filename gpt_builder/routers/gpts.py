from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile

from .. import schemas
from ..deps import get_assistant_service
from ..services.assistants import AssistantService, DocumentUpload
from gpt_builder.utils.logging import logger

router = APIRouter(prefix="/gpts", tags=["gpts"])


@router.get("", response_model=schemas.AssistantListResponse)
def list_gpts(service: AssistantService = Depends(get_assistant_service)):
    logger.info("GET /gpts called")
    gpts = service.list()
    logger.info(f"GET /gpts returning {len(gpts)} GPTs")
    return {"gpts": [schemas.AssistantOut.model_validate(g) for g in gpts]}


@router.post("/create", response_model=schemas.CreateResponse)
def create_gpt(
    name: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    instructions: Optional[str] = Form(None),
    file: Optional[UploadFile] = File(None),
    service: AssistantService = Depends(get_assistant_service),
):
    logger.info(f"POST /gpts/create called name={name!r}, file={file.filename if file else None}")

    upload = None
    if file is not None and file.filename:
        upload = DocumentUpload(file_name=file.filename, content=file.file.read())

    gpt_id = service.create(name, description, instructions, upload)
    return {"success": True, "gptId": gpt_id, "message": "GPT created successfully"}


@router.get("/{gpt_id}", response_model=schemas.AssistantResponse)
def get_gpt(gpt_id: str, service: AssistantService = Depends(get_assistant_service)):
    logger.info(f"GET /gpts/{gpt_id} called")
    return {"gpt": schemas.AssistantOut.model_validate(service.get(gpt_id))}


@router.delete("/{gpt_id}", response_model=schemas.DeleteResponse)
def delete_gpt(gpt_id: str, service: AssistantService = Depends(get_assistant_service)):
    logger.info(f"DELETE /gpts/{gpt_id} called")
    service.delete(gpt_id)
    return {"success": True}


@router.post("/{gpt_id}/chat", response_model=schemas.ChatResponse)
def chat(
    gpt_id: str,
    payload: schemas.ChatRequest,
    service: AssistantService = Depends(get_assistant_service),
):
    logger.info(
        f"POST /gpts/{gpt_id}/chat called: history={len(payload.history or [])}, "
        f"message='{payload.message[:100]}{'...' if len(payload.message) > 100 else ''}'"
    )
    history = [m.model_dump() for m in payload.history or []]
    answer = service.chat(gpt_id, payload.message, history)
    logger.info(f"/chat response ready for gpt_id={gpt_id}: answer_len={len(answer)}")
    return {"response": answer}
