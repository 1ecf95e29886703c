import logging
import time
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from xmlstore.db.repositories.document_repository import XmlDocumentRepository
from xmlstore.domains.documents.entities import XmlDocument, SearchCriteria, MutationRequest
from xmlstore.domains.documents.exceptions import DocumentNotFoundError
from xmlstore.domains.documents.mutation_engine import MutationEngine
from xmlstore.domains.documents.query_engine import search
from xmlstore.domains.documents.schemas import XmlDocumentCreate, XmlUpdateRequest
from xmlstore.domains.documents.transform_engine import TransformEngine
from xmlstore.domains.documents.xml_model import ParsedTreeCache, parse_xml

logger = logging.getLogger(__name__)


class XmlDocumentService:
    """Сервис для работы с XML документами"""

    def __init__(
        self,
        session: AsyncSession,
        mutation_engine: Optional[MutationEngine] = None,
        transform_engine: Optional[TransformEngine] = None,
        tree_cache: Optional[ParsedTreeCache] = None,
        validate_on_create: bool = True
    ):
        self.session = session
        self.document_repository = XmlDocumentRepository(session)
        self.mutation_engine = mutation_engine or MutationEngine()
        self.transform_engine = transform_engine
        self.tree_cache = tree_cache
        self.validate_on_create = validate_on_create

    async def create_document(self, document_data: XmlDocumentCreate) -> XmlDocument:
        """Создание нового документа"""
        document = XmlDocument.create_document(
            name=document_data.name,
            content=document_data.content,
            created_at=document_data.created_at
        )

        # Непустое содержимое должно быть корректным XML с самого начала
        if self.validate_on_create and document.has_content():
            parse_xml(document.content)

        created_document = await self.document_repository.create(document)
        logger.info(f"Created XML document {created_document.id} (name={created_document.name!r})")
        return created_document

    async def get_document(self, document_id: int) -> XmlDocument:
        """Получение документа по id"""
        document = await self.document_repository.get_by_id(document_id)

        if not document:
            raise DocumentNotFoundError(document_id)

        return document

    async def list_documents(self) -> List[XmlDocument]:
        """Получение всех документов"""
        return await self.document_repository.list_all()

    async def search_documents(
        self,
        criteria: SearchCriteria,
        fail_fast: bool = False
    ) -> List[XmlDocument]:
        """Структурный поиск по всем документам"""
        start_time = time.time()

        documents = await self.document_repository.list_all()
        found = search(documents, criteria, fail_fast=fail_fast, cache=self.tree_cache)

        search_time = int((time.time() - start_time) * 1000)  # в миллисекундах
        logger.info(f"Search {criteria} matched {len(found)} of {len(documents)} documents in {search_time} ms")

        return found

    async def update_document_xml(self, document_id: int, update_data: XmlUpdateRequest) -> XmlDocument:
        """Замена значения узла, выбранного XPath, с сохранением результата"""
        document = await self.get_document(document_id)

        request = MutationRequest(xpath=update_data.xpath, new_value=update_data.new_value)
        new_content = self.mutation_engine.apply(document.content, request, document_id=document_id)

        if not await self.document_repository.replace_content(document_id, new_content):
            # документ удалили между чтением и записью
            raise DocumentNotFoundError(document_id)

        if self.tree_cache is not None:
            self.tree_cache.invalidate(document_id)

        document.content = new_content
        logger.info(f"Updated XML document {document_id} at '{request.xpath}'")
        return document

    async def delete_document(self, document_id: int) -> None:
        """Удаление документа"""
        if not await self.document_repository.delete(document_id):
            raise DocumentNotFoundError(document_id)

        if self.tree_cache is not None:
            self.tree_cache.invalidate(document_id)

        logger.info(f"Deleted XML document {document_id}")

    async def render_document(self, document_id: int) -> str:
        """HTML представление документа через XSLT шаблон"""
        document = await self.get_document(document_id)
        return self.transform_engine.render(document)
