from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from webarchive.core.database import get_db
from webarchive.core.security import AuthGate, VerifyOutcome, admin_exists, get_auth_gate
from webarchive.schemas.auth import AuthStatusResponse, LoginRequest, LoginResponse

router = APIRouter(prefix="/auth", tags=["auth"])

@router.post("/login", response_model=LoginResponse)
def login(credentials: LoginRequest, response: Response, db: Session = Depends(get_db), gate: AuthGate = Depends(get_auth_gate)):
    """Vérifie le token admin (le premier token valide devient le token admin)"""

    outcome = gate.verify(db, credentials.token)

    if outcome == VerifyOutcome.FAILED:
        raise HTTPException(status_code=500, detail="Could not verify token")
    if outcome == VerifyOutcome.REJECTED:
        raise HTTPException(status_code=401, detail="Invalid token")

    if outcome == VerifyOutcome.BOOTSTRAPPED:
        response.status_code = status.HTTP_201_CREATED
    return {"status": outcome.value}

@router.get("/status", response_model=AuthStatusResponse)
def auth_status(db: Session = Depends(get_db)):
    # Public : le front sait s'il doit proposer la création du token
    return {"admin_exists": admin_exists(db)}
