"""
Session router.

Endpoints:
  POST /auth/login      : validate, call the API, start the session
  POST /auth/register   : create an account (does not log in)
  POST /auth/logout     : end the session and close every open view
  GET  /auth/session    : current session
  GET  /auth/profile    : fetch the profile
  PUT  /auth/profile    : update username, email or picture
  POST /auth/password   : change password
"""
from fastapi import APIRouter, Depends, HTTPException

from studydesk.models.auth import (
    LoginRequest,
    PasswordChangeRequest,
    ProfileUpdate,
    RegisterRequest,
    SessionSnapshot,
    User,
)
from studydesk.services.workspace import Workspace, get_workspace

router = APIRouter()


@router.post("/login", response_model=SessionSnapshot)
async def login(body: LoginRequest, ws: Workspace = Depends(get_workspace)):
    if not await ws.auth.login(body.email, body.password):
        raise HTTPException(401, ws.auth.error or "Failed to login.")
    return ws.session.snapshot()


@router.post("/register", status_code=201)
async def register(body: RegisterRequest, ws: Workspace = Depends(get_workspace)):
    if not await ws.auth.register(body.username, body.email, body.password):
        raise HTTPException(422, ws.auth.error or "Failed to register.")
    return {"status": "registered"}


@router.post("/logout", response_model=SessionSnapshot)
async def logout(ws: Workspace = Depends(get_workspace)):
    await ws.logout()
    return ws.session.snapshot()


@router.get("/session", response_model=SessionSnapshot)
async def session(ws: Workspace = Depends(get_workspace)):
    return ws.session.snapshot()


@router.get("/profile", response_model=User)
async def profile(ws: Workspace = Depends(get_workspace)):
    user = await ws.auth.load_profile()
    if user is None:
        raise HTTPException(502, "Failed to fetch profile data.")
    return user


@router.post("/password")
async def change_password(body: PasswordChangeRequest, ws: Workspace = Depends(get_workspace)):
    ok = await ws.auth.change_password(
        body.current_password, body.new_password, body.confirm_new_password
    )
    if not ok:
        raise HTTPException(422, ws.auth.error or "Failed to change password.")
    return {"status": "ok"}


@router.put("/profile", response_model=User)
async def update_profile(body: ProfileUpdate, ws: Workspace = Depends(get_workspace)):
    user = await ws.auth.update_profile(
        username=body.username, email=body.email, profileImage=body.profile_image
    )
    if user is None:
        note = ws.notifier.last()
        raise HTTPException(502, note.message if note else "Failed to update profile.")
    return user
