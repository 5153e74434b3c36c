from pydantic import BaseModel

class LoginRequest(BaseModel):
    token: str

class LoginResponse(BaseModel):
    status: str  # "accept" ou "new"

class AuthStatusResponse(BaseModel):
    admin_exists: bool
