from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from webarchive.core.database import get_db
from webarchive.core.security import require_admin
from webarchive.schemas.config import ShowRecentConfig
from webarchive.services.settings_service import get_should_show_recent, set_should_show_recent

router = APIRouter(prefix="/config", tags=["config"], dependencies=[Depends(require_admin)])

@router.get("/show-recent", response_model=ShowRecentConfig)
def get_show_recent(db: Session = Depends(get_db)):
    return {"should_show_recent": get_should_show_recent(db)}

@router.put("/show-recent", response_model=ShowRecentConfig)
def put_show_recent(config: ShowRecentConfig, db: Session = Depends(get_db)):
    return {"should_show_recent": set_should_show_recent(db, config.should_show_recent)}
