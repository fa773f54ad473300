# aceai/models/content.py
from pydantic import BaseModel, Field

from aceai.models.enums import ContentKind


class UploadedFile(BaseModel):
    name: str
    media_type: str = Field(alias="type")
    data: str  # Base64 transport encoding of the raw bytes

    model_config = {"populate_by_name": True}


class ContentPart(BaseModel):
    kind: ContentKind
    value: str  # Text, or a data URL for images

    @classmethod
    def text(cls, value: str) -> "ContentPart":
        return cls(kind=ContentKind.TEXT, value=value)

    @classmethod
    def image(cls, media_type: str, b64_data: str) -> "ContentPart":
        return cls(kind=ContentKind.IMAGE, value=f"data:{media_type};base64,{b64_data}")

    @property
    def is_image(self) -> bool:
        return self.kind == ContentKind.IMAGE
