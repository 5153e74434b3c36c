from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from typing import Optional, List

# Schemas pour les pages

class PageCreate(BaseModel):
    title: str = Field(min_length=1)
    page_url: str
    folder_id: int
    content: str  # html du snapshot
    description: str = ""
    screenshot: Optional[str] = None  # png en base64
    is_showcased: bool = False

class PageUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    page_url: Optional[str] = None
    folder_id: Optional[int] = None
    note: Optional[str] = None
    is_showcased: Optional[bool] = None
    bind_tags: List[str] = []
    unbind_tags: List[str] = []

class PageResponse(BaseModel):
    id: int
    folder_id: int
    title: str
    description: str
    page_url: str
    content_key: str
    screenshot_key: Optional[str]
    note: Optional[str]
    is_showcased: bool
    is_deleted: bool
    deleted_at: Optional[datetime]
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

class PageListResponse(BaseModel):
    items: List[PageResponse]
    total: int
