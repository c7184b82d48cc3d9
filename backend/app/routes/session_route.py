from fastapi import APIRouter, Depends, HTTPException, Request

from app.core.errors import InvalidCredentialsError
from app.models.session_model import LoginRequest, LoginResponse
from app.repos.session_repo import SessionRepository
from app.services.Session_service import SessionGate

router = APIRouter()

# --- Dependency Injection ---
def get_sessions(request: Request) -> SessionRepository:
    return request.app.state.sessions

def get_session_gate(sessions: SessionRepository = Depends(get_sessions)) -> SessionGate:
    return SessionGate(sessions)

@router.post("/login", response_model=LoginResponse)
async def login_endpoint(
    request: LoginRequest,
    gate: SessionGate = Depends(get_session_gate)
):
    try:
        session = gate.login(request.username, request.password)
    except InvalidCredentialsError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return LoginResponse(
        session_id=session.session_id,
        username=session.username,
        message=f"Welcome, {session.username}!"
    )
