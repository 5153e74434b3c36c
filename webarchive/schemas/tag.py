from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from typing import Optional, List

class TagCreate(BaseModel):
    name: str = Field(min_length=1)
    color: Optional[str] = None

class TagUpdate(BaseModel):
    name: Optional[str] = None
    color: Optional[str] = None

class TagResponse(BaseModel):
    id: int
    name: str
    color: Optional[str]
    page_ids: List[int] = []  # calculé depuis page_tags
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
