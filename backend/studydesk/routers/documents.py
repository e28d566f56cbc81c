from fastapi import APIRouter, Depends, HTTPException

from studydesk.models.document import Document, DocumentListSnapshot
from studydesk.services.gateway import GatewayError
from studydesk.services.workspace import Workspace, get_workspace

router = APIRouter()


@router.get("/", response_model=DocumentListSnapshot)
async def list_docs(ws: Workspace = Depends(get_workspace)):
    library = await ws.document_library()
    return library.snapshot()


@router.post("/refresh", response_model=DocumentListSnapshot)
async def refresh_docs(ws: Workspace = Depends(get_workspace)):
    library = await ws.document_library()
    await library.view.refresh()
    return library.snapshot()


@router.post("/{doc_id}/delete", response_model=DocumentListSnapshot)
async def request_delete(doc_id: str, ws: Workspace = Depends(get_workspace)):
    library = await ws.document_library()
    if not library.request_delete(doc_id):
        raise HTTPException(status_code=404, detail="Document not found")
    return library.snapshot()


@router.post("/delete/confirm", response_model=DocumentListSnapshot)
async def confirm_delete(ws: Workspace = Depends(get_workspace)):
    library = await ws.document_library()
    await library.confirm_delete()
    return library.snapshot()


@router.post("/delete/cancel", response_model=DocumentListSnapshot)
async def cancel_delete(ws: Workspace = Depends(get_workspace)):
    library = await ws.document_library()
    library.delete_modal.cancel()
    return library.snapshot()


@router.get("/{doc_id}", response_model=Document)
async def get_doc(doc_id: str, ws: Workspace = Depends(get_workspace)):
    try:
        return await ws.documents.get(doc_id)
    except GatewayError as e:
        raise HTTPException(status_code=e.status_code or 502, detail=e.message) from None
