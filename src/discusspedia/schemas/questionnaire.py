"""Questionnaire-related Pydantic schemas."""

from pydantic import AnyHttpUrl, BaseModel, Field, TypeAdapter, ValidationError, field_validator

from .common import AuthorResponse

_http_url = TypeAdapter(AnyHttpUrl)


class QuestionnaireWrite(BaseModel):
    """Body accepted when creating or updating a questionnaire."""

    category_id: int = Field(..., ge=1)
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1, max_length=10_000)
    link: str = Field(..., description="External form the questionnaire points to")
    reward: str = Field("", max_length=255, description="Optional incentive for respondents")

    @field_validator("link")
    @classmethod
    def validate_link(cls, v: str) -> str:
        """Require an http(s) URL but keep the text exactly as submitted."""
        try:
            _http_url.validate_python(v)
        except ValidationError as exc:
            raise ValueError("Link must be a valid http or https URL") from exc
        return v


class QuestionnaireResponse(BaseModel):
    """Feed and detail representation of a questionnaire."""

    id: int
    is_like: bool = False
    is_author: bool = False
    author: AuthorResponse
    category_id: int
    title: str
    description: str
    link: str
    reward: str = ""
    created_at: str
    comment_count: int = 0
    like_count: int = 0
