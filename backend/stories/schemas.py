from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Optional
from datetime import datetime
from backend.core.schemas import CamelModel


def _clean_tags(v: List[str]) -> List[str]:
    return [t.strip() for t in v if t and t.strip()]


class Story(CamelModel):
    id: str
    title: str
    content: str
    author: str
    author_name: str
    likes: int = 0
    tags: List[str] = []
    image: str = ""
    created_at: datetime
    updated_at: datetime


class StoryCreate(CamelModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(min_length=1, max_length=100)
    content: str = Field(min_length=1, max_length=5000)
    tags: List[str] = []
    image: str = ""

    @field_validator("tags")
    @classmethod
    def clean_tags(cls, v):
        return _clean_tags(v)


class StoryUpdate(CamelModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: Optional[str] = Field(default=None, min_length=1, max_length=100)
    content: Optional[str] = Field(default=None, min_length=1, max_length=5000)
    tags: Optional[List[str]] = None
    image: Optional[str] = None

    @field_validator("tags")
    @classmethod
    def clean_tags(cls, v):
        return _clean_tags(v) if v is not None else v


class StoryResponse(BaseModel):
    success: bool = True
    data: Story


class StoryListResponse(BaseModel):
    success: bool = True
    count: int
    data: List[Story]
