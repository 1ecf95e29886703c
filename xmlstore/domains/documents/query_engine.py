import logging
from typing import Iterable, List, Optional

from lxml import etree

from xmlstore.domains.documents.entities import XmlDocument, SearchCriteria
from xmlstore.domains.documents.exceptions import XmlParseError
from xmlstore.domains.documents.xml_model import (
    ParsedTreeCache, attribute_items, iter_elements, local_name, parse_xml
)

logger = logging.getLogger(__name__)


def has_node(tree: etree._ElementTree, node_name: str) -> bool:
    """Есть ли в дереве элемент с таким локальным именем (на любой глубине)"""
    return any(local_name(el) == node_name for el in iter_elements(tree))


def has_attribute(tree: etree._ElementTree, attribute_name: str) -> bool:
    """Есть ли у какого-либо элемента атрибут с таким локальным именем"""
    return any(
        name == attribute_name
        for el in iter_elements(tree)
        for name, _ in attribute_items(el)
    )


def has_attribute_value(tree: etree._ElementTree, attribute_value: str) -> bool:
    """Есть ли атрибут с точно таким значением, независимо от имени"""
    return any(
        value == attribute_value
        for el in iter_elements(tree)
        for _, value in attribute_items(el)
    )


def matches(
    document: XmlDocument,
    criteria: SearchCriteria,
    tree: Optional[etree._ElementTree] = None
) -> bool:
    """Проверка документа по всем заданным критериям (логическое И).

    Пустые критерии подходят любому документу без разбора содержимого.
    При любом заданном критерии, включая только имя, документ должен
    быть корректным XML. Ошибка разбора пробрасывается как XmlParseError,
    решение о пропуске принимает вызывающий код.
    """
    if criteria.is_empty():
        return True

    if tree is None:
        tree = parse_xml(document.content, document_id=document.id)

    if criteria.name is not None and document.name != criteria.name:
        return False

    if criteria.node is not None and not has_node(tree, criteria.node):
        return False

    if criteria.attribute is not None and not has_attribute(tree, criteria.attribute):
        return False

    if criteria.attribute_value is not None and not has_attribute_value(tree, criteria.attribute_value):
        return False

    return True


def search(
    documents: Iterable[XmlDocument],
    criteria: SearchCriteria,
    fail_fast: bool = False,
    cache: Optional[ParsedTreeCache] = None
) -> List[XmlDocument]:
    """Отбор документов по критериям с сохранением порядка хранилища"""
    found = []

    for document in documents:
        tree = None
        try:
            if not criteria.is_empty():
                if cache is not None:
                    tree = cache.get_tree(document.id, document.content)
                else:
                    tree = parse_xml(document.content, document_id=document.id)

            if matches(document, criteria, tree=tree):
                found.append(document)
        except XmlParseError as e:
            if fail_fast:
                logger.error(f"Search aborted on document {document.id}: {e.message}")
                raise
            logger.warning(f"Skipping document {document.id} during search: {e.message}")

    return found
