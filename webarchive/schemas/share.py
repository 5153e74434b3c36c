from pydantic import BaseModel, ConfigDict
from datetime import datetime
from typing import Optional

class ShareCreate(BaseModel):
    """Créer un lien de partage"""
    page_id: int
    expires_in: Optional[float] = None  # en heures, None ou 0 = jamais

class ShareResponse(BaseModel):
    id: int
    page_id: int
    share_code: str
    expires_at: Optional[datetime]
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

class ShareWithPageTitle(ShareResponse):
    page_title: Optional[str] = None
