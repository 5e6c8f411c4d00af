from typing import Any, Dict, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, StrictStr
from pydantic import ValidationError as PydanticValidationError

from .errors import ValidationError
from .prompts.modes import DEFAULT_ACTION, describe_validation_error

ModelT = TypeVar("ModelT", bound=BaseModel)


def validate_body(model: Type[ModelT], body: Dict[str, Any]) -> ModelT:
    try:
        return model.model_validate(body)
    except PydanticValidationError as exc:
        raise ValidationError(describe_validation_error(exc)) from exc


class PromptRequest(BaseModel):
    """gemini-ai body: ``prompt``, ``action`` and flat mode options.

    A nested ``options`` object is also accepted; its fields win over flat ones.
    """

    model_config = ConfigDict(extra="allow")

    prompt: Optional[StrictStr] = ""
    action: Any = DEFAULT_ACTION
    options: Dict[str, Any] = Field(default_factory=dict)

    @property
    def text(self) -> str:
        return self.prompt or ""

    def mode_options(self) -> Dict[str, Any]:
        merged = dict(self.model_extra or {})
        merged.update(self.options)
        return merged


class SummaryRequest(BaseModel):
    content: StrictStr = ""
    title: StrictStr = ""

    def text_to_summarize(self) -> str:
        if self.title:
            return f"Title: {self.title}\n\nContent: {self.content}"
        return self.content


class ImageRequest(BaseModel):
    prompt: Optional[StrictStr] = ""


class ResultResponse(BaseModel):
    result: str


class ErrorResponse(BaseModel):
    error: str
