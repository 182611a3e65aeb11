from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, List, Optional
from datetime import datetime
import uuid

class PostIn(BaseModel):
    title: str = Field(min_length=1, max_length=300)
    body: str = Field(min_length=1)
    summary: Optional[str] = None
    category_id: Optional[uuid.UUID] = None
    tags: List[str] = []
    status: str = Field(default="draft", pattern="^(draft|published)$")
    schedule_date: Optional[datetime] = None
    featured: bool = False
    read_time: Optional[str] = None

class PostUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=300)
    body: Optional[str] = Field(default=None, min_length=1)
    summary: Optional[str] = None
    category_id: Optional[uuid.UUID] = None
    tags: Optional[List[str]] = None
    status: Optional[str] = Field(default=None, pattern="^(draft|published)$")
    schedule_date: Optional[datetime] = None
    featured: Optional[bool] = None
    read_time: Optional[str] = None

class ReactIn(BaseModel):
    emoji: str = Field(min_length=1, max_length=16)

class PostOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    title: str
    body: str
    summary: Optional[str]
    author_id: uuid.UUID
    category_id: Optional[uuid.UUID]
    tags: List[str] = []
    status: str
    schedule_date: Optional[datetime]
    reactions: List[Dict[str, Any]] = []
    featured: bool
    read_time: Optional[str]
    publish_date: Optional[str]
    news_source: Optional[str]
    created_at: datetime
    updated_at: datetime

class PostPage(BaseModel):
    posts: List[PostOut]
    total: int
    page: int
    pages: int
