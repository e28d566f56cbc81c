"""
Quiz routers.

Document-scoped (mounted under /documents/{document_id}/quizzes):
  GET  /                 : quizzes view
  POST /generate         : generate a quiz (numQuestions must be positive)
  POST /{quiz_id}/delete : open the delete confirmation
  POST /delete/confirm   : run the delete
  POST /delete/cancel    : close the confirmation

Take flow (mounted under /quizzes):
  GET  /{quiz_id}                 : open / show the take flow
  POST /{quiz_id}/answer          : record an answer (last write wins)
  POST /{quiz_id}/next, /previous : wraparound navigation
  POST /{quiz_id}/jump/{index}    : index-dot navigation
  POST /{quiz_id}/submit          : submit once; results on success
  GET  /{quiz_id}/results         : results of a submitted quiz
  POST /{quiz_id}/close           : leave the flow
"""
from fastapi import APIRouter, Depends, HTTPException
from pydantic import Field

from studydesk.flows.quizzes import QuizManager
from studydesk.flows.study import QuizTake
from studydesk.models.ai import GenerateQuizRequest
from studydesk.models.common import WireModel
from studydesk.models.quiz import Quiz, QuizPhase, QuizTakeSnapshot, QuizzesSnapshot
from studydesk.services.workspace import Workspace, get_workspace

router = APIRouter()
take_router = APIRouter()


class AnswerRequest(WireModel):
    question_id: str = Field(alias="questionId")
    option_index: int = Field(alias="optionIndex")


# --- Document quizzes ---


async def _manager(document_id: str, ws: Workspace = Depends(get_workspace)) -> QuizManager:
    return await ws.quiz_manager(document_id)


@router.get("/", response_model=QuizzesSnapshot)
async def get_quizzes(manager: QuizManager = Depends(_manager)):
    return manager.snapshot()


@router.post("/generate", response_model=QuizzesSnapshot)
async def generate(body: GenerateQuizRequest, manager: QuizManager = Depends(_manager)):
    if not await manager.generate(body.num_questions, body.title) and manager.trigger.rejected:
        raise HTTPException(status_code=422, detail=manager.trigger.rejected)
    return manager.snapshot()


@router.post("/{quiz_id}/delete", response_model=QuizzesSnapshot)
async def request_delete(quiz_id: str, manager: QuizManager = Depends(_manager)):
    if not manager.request_delete(quiz_id):
        raise HTTPException(status_code=404, detail="Quiz not found")
    return manager.snapshot()


@router.post("/delete/confirm", response_model=QuizzesSnapshot)
async def confirm_delete(manager: QuizManager = Depends(_manager)):
    await manager.confirm_delete()
    return manager.snapshot()


@router.post("/delete/cancel", response_model=QuizzesSnapshot)
async def cancel_delete(manager: QuizManager = Depends(_manager)):
    manager.delete_modal.cancel()
    return manager.snapshot()


# --- Take flow ---


async def _take(quiz_id: str, ws: Workspace = Depends(get_workspace)) -> QuizTake:
    take = await ws.quiz_take(quiz_id)
    if take is None:
        raise HTTPException(status_code=404, detail="Quiz not found")
    return take


@take_router.get("/{quiz_id}", response_model=QuizTakeSnapshot)
async def get_take(take: QuizTake = Depends(_take)):
    return take.snapshot()


@take_router.post("/{quiz_id}/answer", response_model=QuizTakeSnapshot)
async def answer(body: AnswerRequest, take: QuizTake = Depends(_take)):
    if not take.record_answer(body.question_id, body.option_index):
        raise HTTPException(status_code=422, detail="Answer rejected")
    return take.snapshot()


@take_router.post("/{quiz_id}/next", response_model=QuizTakeSnapshot)
async def next_question(take: QuizTake = Depends(_take)):
    take.cursor.advance()
    return take.snapshot()


@take_router.post("/{quiz_id}/previous", response_model=QuizTakeSnapshot)
async def previous_question(take: QuizTake = Depends(_take)):
    take.cursor.retreat()
    return take.snapshot()


@take_router.post("/{quiz_id}/jump/{index}", response_model=QuizTakeSnapshot)
async def jump(index: int, take: QuizTake = Depends(_take)):
    if not take.cursor.jump_to(index):
        raise HTTPException(status_code=422, detail="Question index out of range")
    return take.snapshot()


@take_router.post("/{quiz_id}/submit", response_model=QuizTakeSnapshot)
async def submit(take: QuizTake = Depends(_take)):
    await take.submit()
    return take.snapshot()


@take_router.get("/{quiz_id}/results", response_model=Quiz)
async def results(take: QuizTake = Depends(_take), ws: Workspace = Depends(get_workspace)):
    if take.phase is not QuizPhase.RESULTS:
        raise HTTPException(status_code=409, detail="Quiz has not been submitted")
    quiz = await take.load_results()
    if quiz is None:
        note = ws.notifier.last()
        detail = note.message if note else "Failed to fetch quiz results."
        raise HTTPException(status_code=502, detail=detail)
    return quiz


@take_router.post("/{quiz_id}/close")
async def close_take(quiz_id: str, ws: Workspace = Depends(get_workspace)):
    return {"closed": await ws.close_view(f"quiz:{quiz_id}")}
