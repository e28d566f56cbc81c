from fastapi import APIRouter, Depends

from studydesk.services.workspace import Workspace, get_workspace

router = APIRouter()


@router.get("/health")
async def health(ws: Workspace = Depends(get_workspace)):
    return {
        "status": "ok",
        "authenticated": ws.session.is_authenticated,
        "open_views": ws.open_views,
    }


@router.delete("/views/{key:path}")
async def close_view(key: str, ws: Workspace = Depends(get_workspace)):
    """Unmount a view; its in-flight calls are cancelled and their results dropped."""
    return {"closed": await ws.close_view(key)}
