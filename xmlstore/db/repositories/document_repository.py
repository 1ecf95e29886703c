from typing import Optional, List, TYPE_CHECKING

from sqlalchemy import select, update, delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from xmlstore.db.models.document import XmlDocument as XmlDocumentModel
from xmlstore.domains.documents.exceptions import RepositoryError

if TYPE_CHECKING:
    from xmlstore.domains.documents.entities import XmlDocument


class XmlDocumentRepository:
    """Репозиторий для работы с XML документами"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, document: "XmlDocument") -> "XmlDocument":
        """Создание нового документа; id назначает база данных"""
        db_document = XmlDocumentModel(
            name=document.name,
            content=document.content,
            created_at=document.created_at
        )

        self.session.add(db_document)
        try:
            await self.session.commit()
            await self.session.refresh(db_document)
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise RepositoryError(f"Failed to insert document: {e}") from e
        return self._to_domain(db_document)

    async def get_by_id(self, document_id: int) -> Optional["XmlDocument"]:
        """Получение документа по id"""
        try:
            result = await self.session.execute(
                select(XmlDocumentModel).where(XmlDocumentModel.id == document_id)
            )
        except SQLAlchemyError as e:
            raise RepositoryError(f"Failed to load document {document_id}: {e}") from e
        db_document = result.scalar_one_or_none()
        return self._to_domain(db_document) if db_document else None

    async def list_all(self) -> List["XmlDocument"]:
        """Все документы в порядке создания"""
        try:
            result = await self.session.execute(
                select(XmlDocumentModel).order_by(XmlDocumentModel.id)
            )
        except SQLAlchemyError as e:
            raise RepositoryError(f"Failed to list documents: {e}") from e
        db_documents = result.scalars().all()
        return [self._to_domain(doc) for doc in db_documents]

    async def replace_content(self, document_id: int, content: str) -> bool:
        """Замена содержимого документа; False если документа нет"""
        stmt = (
            update(XmlDocumentModel)
            .where(XmlDocumentModel.id == document_id)
            .values(content=content)
        )

        try:
            result = await self.session.execute(stmt)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise RepositoryError(f"Failed to update document {document_id}: {e}") from e
        return result.rowcount > 0

    async def delete(self, document_id: int) -> bool:
        """Удаление документа"""
        stmt = delete(XmlDocumentModel).where(XmlDocumentModel.id == document_id)
        try:
            result = await self.session.execute(stmt)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise RepositoryError(f"Failed to delete document {document_id}: {e}") from e
        return result.rowcount > 0

    def _to_domain(self, db_document: XmlDocumentModel) -> "XmlDocument":
        """Преобразование модели БД в доменную сущность"""
        from xmlstore.domains.documents.entities import XmlDocument

        return XmlDocument(
            id=db_document.id,
            name=db_document.name,
            content=db_document.content,
            created_at=db_document.created_at
        )
