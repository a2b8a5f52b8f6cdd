import base64
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from ..history.models import Message


class Language(str, Enum):
    """Response languages supported by the assistant."""

    EN = "en"
    ES = "es"
    FR = "fr"
    DE = "de"
    HI = "hi"
    AR = "ar"
    ZH = "zh"
    JA = "ja"
    TA = "ta"

    @property
    def display_name(self) -> str:
        return _LANGUAGE_NAMES[self]


_LANGUAGE_NAMES = {
    Language.EN: "English",
    Language.ES: "Spanish",
    Language.FR: "French",
    Language.DE: "German",
    Language.HI: "Hindi",
    Language.AR: "Arabic",
    Language.ZH: "Chinese",
    Language.JA: "Japanese",
    Language.TA: "Tamil",
}


def encode_image(data: bytes, mime_type: str = "image/png") -> str:
    """Encode raw image bytes as a data URI.

    Args:
        data: Image file contents
        mime_type: MIME type of the image

    Returns:
        ``data:<mime>;base64,<payload>`` string
    """
    payload = base64.b64encode(data).decode("ascii")
    return f"data:{mime_type};base64,{payload}"


class GatewayContext(BaseModel):
    """Contextual hints sent alongside the conversation."""

    model_config = ConfigDict(frozen=True)

    focus_topic: str | None = Field(default=None, description="Selected anatomical focus")
    language: Language = Field(default=Language.EN, description="Response language")
    image: str | None = Field(default=None, description="Attached image as a data URI")


class GatewayRequest(BaseModel):
    """Request body accepted by the completion function."""

    model_config = ConfigDict(populate_by_name=True)

    messages: list[Message]
    selected_body_part: str | None = Field(default=None, alias="selectedBodyPart")
    language: Language = Language.EN
    image: str | None = None

    @classmethod
    def build(cls, messages: list[Message], context: GatewayContext) -> "GatewayRequest":
        return cls(
            messages=list(messages),
            selected_body_part=context.focus_topic,
            language=context.language,
            image=context.image,
        )

    @property
    def context(self) -> GatewayContext:
        return GatewayContext(
            focus_topic=self.selected_body_part,
            language=self.language,
            image=self.image,
        )

    def to_payload(self) -> dict:
        """Serialize to the JSON body, omitting an absent image."""
        payload = self.model_dump(mode="json", by_alias=True)
        if payload.get("image") is None:
            payload.pop("image", None)
        return payload


class GatewayResponse(BaseModel):
    """Success body returned by the completion function."""

    response: str
