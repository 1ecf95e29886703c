from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status
from fastapi.responses import HTMLResponse
from sqlalchemy.ext.asyncio import AsyncSession

from xmlstore.core.db import get_db
from xmlstore.domains.documents.entities import SearchCriteria
from xmlstore.domains.documents.exceptions import (
    XmlStoreError, DocumentNotFoundError, XmlParseError, InvalidXPathError,
    InvalidValueError, TargetNotFoundError, AmbiguousTargetError, ContentEmptyError,
    TemplateMissingError, TransformError, RepositoryError
)
from xmlstore.domains.documents.schemas import (
    XmlDocumentCreate, XmlDocumentResponse, XmlUpdateRequest, XmlUpdateResponse
)
from xmlstore.domains.documents.services import XmlDocumentService


router = APIRouter(prefix="/api/xmlapi", tags=["xml documents"])

# Соответствие доменных ошибок HTTP статусам
ERROR_STATUS = {
    DocumentNotFoundError: status.HTTP_404_NOT_FOUND,
    TargetNotFoundError: status.HTTP_404_NOT_FOUND,
    XmlParseError: 422,
    InvalidXPathError: status.HTTP_400_BAD_REQUEST,
    InvalidValueError: status.HTTP_400_BAD_REQUEST,
    AmbiguousTargetError: status.HTTP_409_CONFLICT,
    ContentEmptyError: status.HTTP_400_BAD_REQUEST,
    TemplateMissingError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    TransformError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    RepositoryError: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def to_http_exception(error: XmlStoreError) -> HTTPException:
    """Перевод доменной ошибки в HTTPException со структурированным detail"""
    status_code = ERROR_STATUS.get(type(error), status.HTTP_500_INTERNAL_SERVER_ERROR)
    return HTTPException(status_code=status_code, detail=error.to_detail())


def get_document_service(request: Request, db: AsyncSession = Depends(get_db)) -> XmlDocumentService:
    state = request.app.state
    return XmlDocumentService(
        db,
        mutation_engine=state.mutation_engine,
        transform_engine=state.transform_engine,
        tree_cache=state.tree_cache,
        validate_on_create=state.settings.validate_content_on_create
    )


@router.post("", response_model=XmlDocumentResponse, status_code=status.HTTP_201_CREATED)
async def create_xml_document(
    document_data: XmlDocumentCreate,
    response: Response,
    document_service: XmlDocumentService = Depends(get_document_service)
):
    """Создание нового XML документа"""
    try:
        document = await document_service.create_document(document_data)
    except XmlStoreError as e:
        raise to_http_exception(e)

    response.headers["Location"] = f"{router.prefix}/{document.id}"
    return XmlDocumentResponse.model_validate(document)


@router.get("", response_model=List[XmlDocumentResponse])
async def get_all_xml_documents(
    document_service: XmlDocumentService = Depends(get_document_service)
):
    """Получение списка всех документов"""
    try:
        documents = await document_service.list_documents()
    except XmlStoreError as e:
        raise to_http_exception(e)

    if not documents:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"message": "No documents found", "code": DocumentNotFoundError.code}
        )

    return [XmlDocumentResponse.model_validate(doc) for doc in documents]


@router.get("/search", response_model=List[XmlDocumentResponse])
async def search_xml_documents(
    request: Request,
    name: Optional[str] = Query(None),
    node: Optional[str] = Query(None),
    attribute: Optional[str] = Query(None),
    attribute_value: Optional[str] = Query(None, alias="attributeValue"),
    fail_fast: Optional[bool] = Query(None, alias="failFast"),
    document_service: XmlDocumentService = Depends(get_document_service)
):
    """Структурный поиск документов"""
    criteria = SearchCriteria(
        name=name,
        node=node,
        attribute=attribute,
        attribute_value=attribute_value
    )
    if fail_fast is None:
        fail_fast = request.app.state.settings.search_fail_fast

    try:
        documents = await document_service.search_documents(criteria, fail_fast=fail_fast)
    except XmlStoreError as e:
        raise to_http_exception(e)

    return [XmlDocumentResponse.model_validate(doc) for doc in documents]


@router.get("/{document_id}", response_model=XmlDocumentResponse)
async def get_xml_document(
    document_id: int,
    document_service: XmlDocumentService = Depends(get_document_service)
):
    """Получение документа по id"""
    try:
        document = await document_service.get_document(document_id)
    except XmlStoreError as e:
        raise to_http_exception(e)

    return XmlDocumentResponse.model_validate(document)


@router.put("/{document_id}", response_model=XmlUpdateResponse)
async def update_xml_document(
    document_id: int,
    update_data: XmlUpdateRequest,
    document_service: XmlDocumentService = Depends(get_document_service)
):
    """Изменение значения узла по XPath"""
    try:
        document = await document_service.update_document_xml(document_id, update_data)
    except XmlStoreError as e:
        raise to_http_exception(e)

    return XmlUpdateResponse(id=document.id, content=document.content)


@router.delete("/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_xml_document(
    document_id: int,
    document_service: XmlDocumentService = Depends(get_document_service)
):
    """Удаление документа"""
    try:
        await document_service.delete_document(document_id)
    except XmlStoreError as e:
        raise to_http_exception(e)

    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{document_id}/transform", response_class=HTMLResponse)
async def transform_xml_document(
    document_id: int,
    document_service: XmlDocumentService = Depends(get_document_service)
):
    """HTML представление документа через XSLT"""
    try:
        html = await document_service.render_document(document_id)
    except XmlStoreError as e:
        raise to_http_exception(e)

    return HTMLResponse(content=html)
