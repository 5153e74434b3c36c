"""
Vérification du credential admin.

Un seul secret admin. Son digest SHA-256 est stocké sous une clé fixe dans la
table `stores` ; le premier secret valide présenté devient ce credential
(bootstrap). Les digests vérifiés sont gardés un moment dans un TokenCache
local au process pour éviter un aller-retour DB à chaque requête.
"""

import enum
import hashlib
import logging
import threading
import time
from typing import Callable, Dict, Optional

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from webarchive.core.config import settings
from webarchive.core.database import get_db
from webarchive.models.store import ADMIN_TOKEN_KEY, StoreEntry

logger = logging.getLogger(__name__)

MIN_TOKEN_LENGTH = 8


class VerifyOutcome(str, enum.Enum):
    ACCEPTED = "accept"
    BOOTSTRAPPED = "new"
    REJECTED = "reject"
    FAILED = "fail"


def hash_token(token: str) -> str:
    return hashlib.sha256(token.encode()).hexdigest()


class TokenCache:
    """digest vérifié -> instant d'expiration (thread-safe)"""

    def __init__(self, ttl_seconds: float = 600, clock: Callable[[], float] = time.monotonic):
        self.ttl = ttl_seconds
        self._clock = clock
        self._entries: Dict[str, float] = {}
        self._lock = threading.Lock()

    def contains(self, digest: str) -> bool:
        with self._lock:
            expiry = self._entries.get(digest)
            if expiry is None:
                return False
            if self._clock() < expiry:
                return True
            # expiré : on le retire avant de retomber sur la DB
            del self._entries[digest]
            return False

    def add(self, digest: str) -> None:
        with self._lock:
            self._entries[digest] = self._clock() + self.ttl

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


def admin_exists(db: Session) -> bool:
    return db.query(StoreEntry).filter(StoreEntry.key == ADMIN_TOKEN_KEY).count() > 0


def _credential_matches(db: Session, digest: str) -> bool:
    return db.query(StoreEntry).filter(
        StoreEntry.key == ADMIN_TOKEN_KEY,
        StoreEntry.value == digest
    ).count() > 0


class AuthGate:
    def __init__(self, cache: TokenCache):
        self.cache = cache

    def verify(self, db: Session, candidate: Optional[str]) -> VerifyOutcome:
        if not isinstance(candidate, str) or len(candidate) < MIN_TOKEN_LENGTH:
            return VerifyOutcome.REJECTED

        digest = hash_token(candidate)

        # Fast path
        if self.cache.contains(digest):
            return VerifyOutcome.ACCEPTED

        try:
            if _credential_matches(db, digest):
                self.cache.add(digest)
                return VerifyOutcome.ACCEPTED

            if admin_exists(db):
                logger.warning("Rejected an admin token that does not match the stored credential")
                return VerifyOutcome.REJECTED

            return self._bootstrap(db, digest)
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Store error while verifying admin token: {e}")
            return VerifyOutcome.FAILED

    def _bootstrap(self, db: Session, digest: str) -> VerifyOutcome:
        db.add(StoreEntry(key=ADMIN_TOKEN_KEY, value=digest))
        try:
            db.commit()
        except IntegrityError:
            # une autre requête a créé le credential entre le check et l'insert
            db.rollback()
            logger.warning("Admin bootstrap lost the race, credential already exists")
            return VerifyOutcome.REJECTED

        # le prochain appel revérifie contre la DB
        self.cache.clear()
        logger.info("Admin credential bootstrapped")
        return VerifyOutcome.BOOTSTRAPPED


auth_gate = AuthGate(TokenCache(ttl_seconds=settings.TOKEN_CACHE_TTL_SECONDS))


def get_auth_gate() -> AuthGate:
    return auth_gate


def extract_bearer(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    return authorization.replace("Bearer ", "", 1).strip()


def require_admin(
    db: Session = Depends(get_db),
    gate: AuthGate = Depends(get_auth_gate),
    authorization: Optional[str] = Header(None)
) -> VerifyOutcome:
    token = extract_bearer(authorization)
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing token")

    outcome = gate.verify(db, token)
    if outcome == VerifyOutcome.FAILED:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Could not verify token")
    if outcome == VerifyOutcome.REJECTED:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")

    return outcome
