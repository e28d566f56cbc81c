"""
Flashcard router (mounted under /documents/{document_id}/flashcards).

Endpoints:
  GET  /                    : sets view (mounts it on first use)
  POST /generate            : fire the generation trigger
  POST /{set_id}/delete     : open the delete confirmation
  POST /delete/confirm      : run the delete
  POST /delete/cancel       : close the confirmation
  POST /{set_id}/study      : open a set in the study flow
  POST /study/flip          : reveal / hide the answer
  POST /study/next          : review current card, move forward (wraps)
  POST /study/previous      : review current card, move back (wraps)
  POST /study/jump/{index}  : index-dot navigation
  POST /study/star/{card_id}: optimistic star toggle
  POST /study/close         : back to the set list
"""
from fastapi import APIRouter, Depends, HTTPException

from studydesk.flows.flashcards import FlashcardManager
from studydesk.flows.study import FlashcardStudy
from studydesk.models.flashcard import FlashcardSetsSnapshot
from studydesk.services.workspace import Workspace, get_workspace

router = APIRouter()


async def _manager(document_id: str, ws: Workspace = Depends(get_workspace)) -> FlashcardManager:
    return await ws.flashcard_manager(document_id)


def _study(manager: FlashcardManager) -> FlashcardStudy:
    if manager.study is None:
        raise HTTPException(status_code=404, detail="No flashcard set is open")
    return manager.study


@router.get("/", response_model=FlashcardSetsSnapshot)
async def get_sets(manager: FlashcardManager = Depends(_manager)):
    return manager.snapshot()


@router.post("/generate", response_model=FlashcardSetsSnapshot)
async def generate(count: int | None = None, manager: FlashcardManager = Depends(_manager)):
    await manager.generate(count)
    return manager.snapshot()


@router.post("/{set_id}/delete", response_model=FlashcardSetsSnapshot)
async def request_delete(set_id: str, manager: FlashcardManager = Depends(_manager)):
    if not manager.request_delete(set_id):
        raise HTTPException(status_code=404, detail="Flashcard set not found")
    return manager.snapshot()


@router.post("/delete/confirm", response_model=FlashcardSetsSnapshot)
async def confirm_delete(manager: FlashcardManager = Depends(_manager)):
    await manager.confirm_delete()
    return manager.snapshot()


@router.post("/delete/cancel", response_model=FlashcardSetsSnapshot)
async def cancel_delete(manager: FlashcardManager = Depends(_manager)):
    manager.delete_modal.cancel()
    return manager.snapshot()


@router.post("/{set_id}/study", response_model=FlashcardSetsSnapshot)
async def open_set(set_id: str, manager: FlashcardManager = Depends(_manager)):
    if await manager.open_set(set_id) is None:
        raise HTTPException(status_code=404, detail="Flashcard set not found")
    return manager.snapshot()


@router.post("/study/flip", response_model=FlashcardSetsSnapshot)
async def flip(manager: FlashcardManager = Depends(_manager)):
    _study(manager).flip()
    return manager.snapshot()


@router.post("/study/next", response_model=FlashcardSetsSnapshot)
async def next_card(manager: FlashcardManager = Depends(_manager)):
    await _study(manager).next()
    return manager.snapshot()


@router.post("/study/previous", response_model=FlashcardSetsSnapshot)
async def previous_card(manager: FlashcardManager = Depends(_manager)):
    await _study(manager).previous()
    return manager.snapshot()


@router.post("/study/jump/{index}", response_model=FlashcardSetsSnapshot)
async def jump(index: int, manager: FlashcardManager = Depends(_manager)):
    if not _study(manager).jump_to(index):
        raise HTTPException(status_code=422, detail="Card index out of range")
    return manager.snapshot()


@router.post("/study/star/{card_id}", response_model=FlashcardSetsSnapshot)
async def toggle_star(card_id: str, manager: FlashcardManager = Depends(_manager)):
    if await _study(manager).toggle_star(card_id) is None:
        raise HTTPException(status_code=404, detail="Flashcard not found")
    return manager.snapshot()


@router.post("/study/close", response_model=FlashcardSetsSnapshot)
async def close_set(manager: FlashcardManager = Depends(_manager)):
    await manager.close_set()
    return manager.snapshot()
