import logging
from pathlib import Path
from typing import Optional

from lxml import etree

from xmlstore.domains.documents.entities import XmlDocument
from xmlstore.domains.documents.exceptions import (
    ContentEmptyError, TemplateMissingError, TransformError
)
from xmlstore.domains.documents.xml_model import parse_xml

logger = logging.getLogger(__name__)


class TransformEngine:
    """Рендеринг документа в HTML через фиксированный XSLT шаблон"""

    def __init__(self, template_path: str, cache_template: bool = True):
        self.template_path = Path(template_path)
        self.cache_template = cache_template
        self._template: Optional[etree.XSLT] = None

    def load_template(self) -> etree.XSLT:
        """Загрузка и компиляция шаблона"""
        if self._template is not None:
            return self._template

        try:
            template_bytes = self.template_path.read_bytes()
        except OSError as e:
            logger.error(f"Transformation template unavailable at {self.template_path}: {e}")
            raise TemplateMissingError(str(self.template_path)) from e

        parser = etree.XMLParser(resolve_entities=False, no_network=True)
        try:
            template = etree.XSLT(etree.fromstring(template_bytes, parser))
        except (etree.XMLSyntaxError, etree.XSLTParseError) as e:
            raise TransformError(f"Transformation template is invalid: {e}") from e

        if self.cache_template:
            self._template = template
        return template

    def render(self, document: XmlDocument) -> str:
        """HTML представление документа"""
        # Пустое содержимое отклоняется до обращения к шаблону
        if not document.has_content():
            raise ContentEmptyError(document.id)

        template = self.load_template()
        tree = parse_xml(document.content, document_id=document.id)

        try:
            result = template(tree)
        except etree.XSLTApplyError as e:
            logger.error(f"Transformation failed for document {document.id}: {e}")
            raise TransformError(f"Transformation failed: {e}") from e

        return str(result)
