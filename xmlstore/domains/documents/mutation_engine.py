import logging
from typing import List, Optional

from lxml import etree

from xmlstore.domains.documents.entities import MutationRequest
from xmlstore.domains.documents.exceptions import (
    AmbiguousTargetError, InvalidValueError, InvalidXPathError, TargetNotFoundError
)
from xmlstore.domains.documents.xml_model import parse_xml, serialize_xml, set_text

logger = logging.getLogger(__name__)


def _is_target(node) -> bool:
    """Изменять можно только элементы и атрибуты"""
    if isinstance(node, etree._Element):
        # комментарии и инструкции обработки тоже _Element, но без строкового тега
        return isinstance(node.tag, str)
    if isinstance(node, etree._ElementUnicodeResult):
        return node.is_attribute
    return False


def _replace_value(node, new_value: str) -> None:
    if isinstance(node, etree._Element):
        set_text(node, new_value)
        return

    node.getparent().set(node.attrname, new_value)


class MutationEngine:
    """Точечное изменение документа по XPath выражению.

    По умолчанию при нескольких совпадениях изменяется первое в порядке
    документа. С ``reject_ambiguous=True`` такое выражение отклоняется.
    """

    def __init__(self, reject_ambiguous: bool = False):
        self.reject_ambiguous = reject_ambiguous

    def resolve(self, tree: etree._ElementTree, xpath: str) -> List:
        """Все изменяемые узлы, выбранные выражением, в порядке документа"""
        try:
            result = tree.xpath(xpath)
        except etree.XPathError as e:
            raise InvalidXPathError(xpath, str(e)) from e

        if not isinstance(result, list):
            raise InvalidXPathError(xpath, "expression does not select nodes")

        return [node for node in result if _is_target(node)]

    def apply(self, content: str, request: MutationRequest, document_id: Optional[int] = None) -> str:
        """Новое содержимое документа после замены значения узла.

        Исходный текст не меняется: при любой ошибке вызывающий код
        просто не записывает результат.
        """
        tree = parse_xml(content, document_id=document_id)
        targets = self.resolve(tree, request.xpath)

        if not targets:
            raise TargetNotFoundError(request.xpath, document_id=document_id)

        if len(targets) > 1:
            if self.reject_ambiguous:
                raise AmbiguousTargetError(request.xpath, len(targets), document_id=document_id)
            logger.info(
                f"XPath '{request.xpath}' matched {len(targets)} nodes in document {document_id}, "
                f"updating the first one"
            )

        try:
            _replace_value(targets[0], request.new_value)
        except ValueError as e:
            # lxml отклоняет управляющие символы и прочее, что нельзя записать в XML
            raise InvalidValueError(request.xpath, str(e)) from e

        return serialize_xml(tree)
