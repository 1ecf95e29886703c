from xmlstore.db.repositories.document_repository import XmlDocumentRepository

__all__ = [
    "XmlDocumentRepository",
]
