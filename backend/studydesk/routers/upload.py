from fastapi import APIRouter, Depends, Form, HTTPException, UploadFile

from studydesk.models.document import DocumentListSnapshot
from studydesk.services.workspace import Workspace, get_workspace

router = APIRouter()


@router.post("/upload", response_model=DocumentListSnapshot, status_code=201)
async def upload_document(
    file: UploadFile,
    title: str = Form(default=""),
    ws: Workspace = Depends(get_workspace),
):
    if not file.filename or not file.filename.lower().endswith(".pdf"):
        raise HTTPException(400, "Only PDF files are supported")

    content = await file.read()
    library = await ws.document_library()
    doc = await library.upload(file.filename, content, title or None)
    if doc is None and library.form.file_name is not None:
        # Form kept its contents: the upload did not go through
        note = ws.notifier.last()
        raise HTTPException(502, note.message if note else "Upload failed.")
    return library.snapshot()
