from datetime import datetime, timezone

from sqlalchemy import Column, String, Text, DateTime

from xmlstore.db.base import BaseModel


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class XmlDocument(BaseModel):
    __tablename__ = "xml_documents"

    name = Column(String(255), nullable=True, index=True)
    content = Column(Text, nullable=False, default="")
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
