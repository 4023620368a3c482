"""News schemas."""

from typing import ClassVar, Optional

from pydantic import Field

from api.schemas.common import CamelModel, PartialUpdate, RequiredStr
from core.entities import NewsCategory


class NewsCreate(CamelModel):
    title: RequiredStr
    content: RequiredStr
    excerpt: Optional[str] = None
    image: Optional[str] = None
    category: NewsCategory = NewsCategory.GENERAL
    source: str = "KARE ACM SIGBED"
    author: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
    is_published: bool = True
    is_featured: bool = False


class NewsUpdate(PartialUpdate):
    clearable: ClassVar[frozenset[str]] = frozenset({"excerpt", "image", "author"})

    title: Optional[RequiredStr] = None
    content: Optional[RequiredStr] = None
    excerpt: Optional[str] = None
    image: Optional[str] = None
    category: Optional[NewsCategory] = None
    source: Optional[str] = None
    author: Optional[str] = None
    tags: Optional[list[str]] = None
    is_published: Optional[bool] = None
    is_featured: Optional[bool] = None
