from pydantic import BaseModel, Field

class Session(BaseModel):
    session_id: str
    username: str

class LoginRequest(BaseModel):
    username: str = Field(..., description="Any non-empty user name")
    password: str = Field(..., description="Any non-empty password, not verified")

class LoginResponse(BaseModel):
    session_id: str
    username: str
    message: str
