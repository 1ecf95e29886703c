from pydantic import AliasChoices, BaseModel, Field, field_validator, ConfigDict
from typing import Optional
from datetime import datetime


class XmlDocumentBase(BaseModel):
    """Базовая схема XML документа"""
    name: Optional[str] = Field(None, max_length=255)
    content: str = ""


class XmlDocumentCreate(XmlDocumentBase):
    """Схема для создания документа"""
    content: str = Field(default="", max_length=1000000)  # 1MB max content
    created_at: Optional[datetime] = None

    @field_validator('content', mode='before')
    @classmethod
    def validate_content(cls, v):
        return "" if v is None else v


class XmlDocumentResponse(XmlDocumentBase):
    """Схема для ответа с данными документа"""
    id: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class XmlUpdateRequest(BaseModel):
    """Запрос на изменение элемента по XPath"""
    xpath: str = Field(..., min_length=1, validation_alias=AliasChoices("xpath", "xPath", "XPath"))
    new_value: str = Field(
        ...,
        max_length=1000000,
        validation_alias=AliasChoices("new_value", "newValue", "NewValue")
    )

    @field_validator('xpath')
    @classmethod
    def validate_xpath(cls, v):
        if not v.strip():
            raise ValueError('XPath expression cannot be empty')
        return v.strip()


class XmlUpdateResponse(BaseModel):
    """Ответ после изменения документа"""
    message: str = "XML updated"
    id: int
    content: str
