from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
from datetime import datetime
import uuid

class SuggestionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    title: str
    content: str
    summary: str
    tags: List[str] = []
    category: Optional[str]
    source: str
    news_url: Optional[str]
    unique_id: Optional[str]
    featured: bool
    read_time: Optional[str]
    publish_date: Optional[str]
    status: str
    admin_notes: Optional[str]
    generated_at: datetime
    approved_at: Optional[datetime]
    published_at: Optional[datetime]
    post_id: Optional[uuid.UUID]

class ApproveRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    admin_notes: Optional[str] = Field(default=None, alias="adminNotes")
    should_publish: bool = Field(default=True, alias="shouldPublish")

class RejectRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    admin_notes: Optional[str] = Field(default=None, alias="adminNotes")
