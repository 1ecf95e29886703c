from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional


class XmlDocument:
    """Сущность XML документа"""

    def __init__(
        self,
        id: Optional[int],
        name: Optional[str] = None,
        content: str = "",
        created_at: Optional[datetime] = None
    ):
        self.id = id
        self.name = name
        self.content = content if content is not None else ""
        self.created_at = created_at or datetime.now(timezone.utc)

    def has_content(self) -> bool:
        """Есть ли у документа непустое содержимое"""
        return bool(self.content.strip())

    @classmethod
    def create_document(
        cls,
        name: Optional[str] = None,
        content: str = "",
        created_at: Optional[datetime] = None
    ) -> "XmlDocument":
        """Новый документ без идентификатора (его назначает хранилище)"""
        return cls(id=None, name=name, content=content, created_at=created_at)

    def __eq__(self, other) -> bool:
        if not isinstance(other, XmlDocument):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __repr__(self) -> str:
        return f"XmlDocument(id={self.id}, name={self.name!r}, content_length={len(self.content)})"


@dataclass(frozen=True)
class SearchCriteria:
    """Конъюнкция структурных условий поиска; пустые поля не ограничивают"""
    name: Optional[str] = None
    node: Optional[str] = None
    attribute: Optional[str] = None
    attribute_value: Optional[str] = None

    def has_structural_criteria(self) -> bool:
        return any(v is not None for v in (self.node, self.attribute, self.attribute_value))

    def is_empty(self) -> bool:
        return self.name is None and not self.has_structural_criteria()


@dataclass(frozen=True)
class MutationRequest:
    xpath: str
    new_value: str
