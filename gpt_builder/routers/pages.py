from pathlib import Path

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from gpt_builder.utils.logging import logger

router = APIRouter(include_in_schema=False)

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent.parent / "templates"))


@router.get("/", response_class=HTMLResponse)
def home(request: Request):
    logger.info("Rendering home page")
    return templates.TemplateResponse(request, "index.html", {})


@router.get("/gpt/{gpt_id}", response_class=HTMLResponse)
def chat_page(request: Request, gpt_id: str):
    # The page loads the GPT itself through /gpts/{id}; a bad id shows an error there.
    logger.info(f"Rendering chat page for gpt_id={gpt_id}")
    return templates.TemplateResponse(request, "chat.html", {"gpt_id": gpt_id})
