from fastapi import APIRouter, Depends

from studydesk.models.chat import ChatSnapshot
from studydesk.models.common import WireModel
from studydesk.services.workspace import Workspace, get_workspace

router = APIRouter()


class SendRequest(WireModel):
    message: str


@router.get("/", response_model=ChatSnapshot)
async def get_thread(document_id: str, ws: Workspace = Depends(get_workspace)):
    thread = await ws.chat(document_id)
    return thread.snapshot()


@router.post("/", response_model=ChatSnapshot)
async def send_message(document_id: str, body: SendRequest, ws: Workspace = Depends(get_workspace)):
    thread = await ws.chat(document_id)
    await thread.send(body.message)
    return thread.snapshot()
