import logging
import uuid
from app.core.errors import InvalidCredentialsError
from app.core.logger import logs
from app.models.session_model import Session
from app.repos.session_repo import SessionRepository

class SessionGate:
    """
    Lets anyone in who types a non-empty username and password.
    Credentials are not checked against anything.
    """
    def __init__(self, repo: SessionRepository):
        self.repo = repo

    def login(self, username: str, password: str) -> Session:
        if not username.strip() or not password.strip():
            logs.log(logging.WARNING, "Login rejected: empty username or password")
            raise InvalidCredentialsError("Please enter valid credentials")

        session = Session(session_id=str(uuid.uuid4()), username=username)
        self.repo.create(session)
        return session
