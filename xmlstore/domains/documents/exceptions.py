from typing import Any, Dict, Optional


class XmlStoreError(Exception):
    """Базовое исключение хранилища XML документов"""

    code = "XML_STORE_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_detail(self) -> Dict[str, Any]:
        """Структурированное описание ошибки для ответа клиенту"""
        return {"message": self.message, "code": self.code}


class DocumentNotFoundError(XmlStoreError):
    code = "NOT_FOUND"

    def __init__(self, document_id: int):
        super().__init__("The requested XML Document was not found in the Database")
        self.document_id = document_id

    def to_detail(self) -> Dict[str, Any]:
        return {**super().to_detail(), "requested_id": self.document_id}


class XmlParseError(XmlStoreError):
    """Содержимое не является корректным XML"""

    code = "PARSE_ERROR"

    def __init__(self, message: str, document_id: Optional[int] = None):
        super().__init__(message)
        self.document_id = document_id

    def to_detail(self) -> Dict[str, Any]:
        detail = super().to_detail()
        if self.document_id is not None:
            detail["document_id"] = self.document_id
        return detail


class InvalidXPathError(XmlStoreError):
    code = "INVALID_XPATH"

    def __init__(self, xpath: str, reason: str):
        super().__init__(f"Invalid XPath expression '{xpath}': {reason}")
        self.xpath = xpath

    def to_detail(self) -> Dict[str, Any]:
        return {**super().to_detail(), "xpath": self.xpath}


class InvalidValueError(XmlStoreError):
    """Новое значение нельзя записать в XML (управляющие символы и т.п.)"""

    code = "INVALID_VALUE"

    def __init__(self, xpath: str, reason: str):
        super().__init__(f"Value cannot be stored in XML: {reason}")
        self.xpath = xpath

    def to_detail(self) -> Dict[str, Any]:
        return {**super().to_detail(), "xpath": self.xpath}


class TargetNotFoundError(XmlStoreError):
    """XPath выражение не выбрало ни одного узла"""

    code = "TARGET_NOT_FOUND"

    def __init__(self, xpath: str, document_id: Optional[int] = None):
        super().__init__("XPath element not found")
        self.xpath = xpath
        self.document_id = document_id

    def to_detail(self) -> Dict[str, Any]:
        return {**super().to_detail(), "xpath": self.xpath, "document_id": self.document_id}


class AmbiguousTargetError(XmlStoreError):
    code = "AMBIGUOUS_TARGET"

    def __init__(self, xpath: str, match_count: int, document_id: Optional[int] = None):
        super().__init__(f"XPath expression matched {match_count} nodes, expected exactly one")
        self.xpath = xpath
        self.match_count = match_count
        self.document_id = document_id

    def to_detail(self) -> Dict[str, Any]:
        return {
            **super().to_detail(),
            "xpath": self.xpath,
            "match_count": self.match_count,
            "document_id": self.document_id,
        }


class ContentEmptyError(XmlStoreError):
    code = "CONTENT_EMPTY"

    def __init__(self, document_id: Optional[int] = None):
        super().__init__("XML content is missing or empty.")
        self.document_id = document_id

    def to_detail(self) -> Dict[str, Any]:
        return {**super().to_detail(), "document_id": self.document_id}


class TemplateMissingError(XmlStoreError):
    code = "TEMPLATE_MISSING"

    def __init__(self, path: str):
        super().__init__(f"Transformation template not found: {path}")
        self.path = path


class TransformError(XmlStoreError):
    code = "TRANSFORM_ERROR"


class RepositoryError(XmlStoreError):
    """Сбой хранилища (соединение, транзакция), не доменная ошибка"""

    code = "REPOSITORY_ERROR"
