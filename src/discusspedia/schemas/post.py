"""Post-related Pydantic schemas."""

from pydantic import BaseModel, Field

from .common import AuthorResponse


class PostWrite(BaseModel):
    """Body accepted when creating or updating a post."""

    category_id: int = Field(..., ge=1, description="Category the post is filed under")
    title: str = Field(..., min_length=1, max_length=255, description="Post title")
    description: str = Field(..., min_length=1, max_length=10_000, description="Post body")


class PostImageResponse(BaseModel):
    """Image attached to a post."""

    id: int
    url: str


class PostResponse(BaseModel):
    """Feed and detail representation of a post."""

    id: int
    is_like: bool = Field(False, description="Whether the viewer liked this post")
    is_author: bool = Field(False, description="Whether the viewer wrote this post")
    author: AuthorResponse
    category_id: int
    title: str
    description: str
    created_at: str
    comment_count: int = 0
    like_count: int = 0
    images: list[PostImageResponse] = Field(default_factory=list)


class ImageUploadFailure(BaseModel):
    """A file that could not be stored or recorded."""

    filename: str
    error: str


class ImageUploadResponse(BaseModel):
    """Per-file outcome of an image upload request."""

    message: str
    uploaded: list[PostImageResponse] = Field(default_factory=list)
    failed: list[ImageUploadFailure] = Field(default_factory=list)
