from fastapi import APIRouter, Depends

from studydesk.models.ai import AIActionsSnapshot, ExplainRequest
from studydesk.services.workspace import Workspace, get_workspace

router = APIRouter()


@router.get("/", response_model=AIActionsSnapshot)
async def get_actions(document_id: str, ws: Workspace = Depends(get_workspace)):
    return (await ws.ai_actions(document_id)).snapshot()


@router.post("/summary", response_model=AIActionsSnapshot)
async def summarize(document_id: str, ws: Workspace = Depends(get_workspace)):
    actions = await ws.ai_actions(document_id)
    await actions.summarize()
    return actions.snapshot()


@router.post("/explain", response_model=AIActionsSnapshot)
async def explain(document_id: str, body: ExplainRequest, ws: Workspace = Depends(get_workspace)):
    actions = await ws.ai_actions(document_id)
    await actions.explain(body.concept)
    return actions.snapshot()


@router.post("/modal/close", response_model=AIActionsSnapshot)
async def close_modal(document_id: str, ws: Workspace = Depends(get_workspace)):
    actions = await ws.ai_actions(document_id)
    actions.close_modal()
    return actions.snapshot()
