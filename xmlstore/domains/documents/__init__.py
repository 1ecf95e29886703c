from xmlstore.domains.documents.entities import XmlDocument, SearchCriteria, MutationRequest
from xmlstore.domains.documents.exceptions import (
    XmlStoreError, DocumentNotFoundError, XmlParseError, InvalidXPathError,
    InvalidValueError, TargetNotFoundError, AmbiguousTargetError, ContentEmptyError,
    TemplateMissingError, TransformError, RepositoryError
)
from xmlstore.domains.documents.schemas import (
    XmlDocumentBase, XmlDocumentCreate, XmlDocumentResponse,
    XmlUpdateRequest, XmlUpdateResponse
)

__all__ = [
    "XmlDocument", "SearchCriteria", "MutationRequest",
    "XmlStoreError", "DocumentNotFoundError", "XmlParseError", "InvalidXPathError",
    "InvalidValueError", "TargetNotFoundError", "AmbiguousTargetError", "ContentEmptyError",
    "TemplateMissingError", "TransformError", "RepositoryError",
    "XmlDocumentBase", "XmlDocumentCreate", "XmlDocumentResponse",
    "XmlUpdateRequest", "XmlUpdateResponse",
]
