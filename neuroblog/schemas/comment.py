from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
from datetime import datetime
import uuid

class CommentIn(BaseModel):
    content: str = Field(min_length=1)
    post_id: uuid.UUID
    parent_id: Optional[uuid.UUID] = None

class CommentUpdate(BaseModel):
    content: str = Field(min_length=1)

class CommentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    content: str
    author_id: uuid.UUID
    post_id: uuid.UUID
    parent_id: Optional[uuid.UUID]
    upvotes: int
    created_at: datetime

class CommentThreadOut(CommentOut):
    replies: List[CommentOut] = []
