from fastapi import APIRouter, Depends, HTTPException

from studydesk.models.dashboard import DashboardSnapshot
from studydesk.models.flashcard import Flashcard
from studydesk.services.gateway import GatewayError
from studydesk.services.workspace import Workspace, get_workspace

router = APIRouter()


@router.get("/", response_model=DashboardSnapshot)
async def get_dashboard(ws: Workspace = Depends(get_workspace)):
    return (await ws.dashboard()).snapshot()


@router.post("/refresh", response_model=DashboardSnapshot)
async def refresh_dashboard(ws: Workspace = Depends(get_workspace)):
    dashboard = await ws.dashboard()
    await dashboard.refresh()
    return dashboard.snapshot()


@router.get("/starred", response_model=list[Flashcard])
async def starred_flashcards(ws: Workspace = Depends(get_workspace)):
    try:
        return await ws.flashcards.starred()
    except GatewayError as e:
        raise HTTPException(status_code=e.status_code or 502, detail=e.message) from None
