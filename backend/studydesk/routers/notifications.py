from fastapi import APIRouter, Depends, HTTPException

from studydesk.models.common import Notification
from studydesk.services.workspace import Workspace, get_workspace

router = APIRouter()


@router.get("/", response_model=list[Notification])
async def list_notifications(ws: Workspace = Depends(get_workspace)):
    return ws.notifier.items()


@router.delete("/{note_id}", status_code=204)
async def dismiss(note_id: int, ws: Workspace = Depends(get_workspace)) -> None:
    if not ws.notifier.dismiss(note_id):
        raise HTTPException(status_code=404, detail="Notification not found")
