"""
Обертка над lxml: разбор, сериализация и навигация по дереву документа.

Все остальные компоненты (поиск, изменение по XPath, XSLT) работают
с деревьями, полученными через ``parse_xml``.
"""
import hashlib
from collections import OrderedDict
from typing import Iterator, Optional, Tuple

from lxml import etree

from xmlstore.domains.documents.exceptions import XmlParseError


def _make_parser() -> etree.XMLParser:
    # Настройки безопасности парсера XML
    return etree.XMLParser(
        resolve_entities=False,
        no_network=True,
        huge_tree=False,
        recover=False,
        # текст уже в UTF-8, объявление кодировки в документе не учитывается
        encoding="utf-8"
    )


def parse_xml(text: str, document_id: Optional[int] = None) -> etree._ElementTree:
    """Разбор текста XML в дерево; пустой текст не является XML"""
    if text is None or not text.strip():
        raise XmlParseError("XML content is empty", document_id=document_id)

    try:
        # lxml не принимает str с объявлением кодировки, поэтому разбираем байты
        root = etree.fromstring(text.encode("utf-8"), parser=_make_parser())
    except etree.XMLSyntaxError as e:
        raise XmlParseError(f"Malformed XML: {e}", document_id=document_id) from e

    return root.getroottree()


def serialize_xml(tree: etree._ElementTree) -> str:
    """Сериализация дерева обратно в текст без XML-декларации"""
    return etree.tostring(tree, encoding="unicode")


def local_name(node) -> str:
    """Локальное имя элемента или атрибута без пространства имен"""
    tag = node.tag if isinstance(node, etree._Element) else node
    return etree.QName(tag).localname


def iter_elements(tree: etree._ElementTree) -> Iterator[etree._Element]:
    """Все элементы дерева, включая корень; комментарии и PI пропускаются"""
    return tree.getroot().iter(etree.Element)


def attribute_items(element: etree._Element) -> Iterator[Tuple[str, str]]:
    """Пары (локальное имя, значение) атрибутов элемента"""
    for name, value in element.attrib.items():
        yield local_name(name), value


def set_text(element: etree._Element, value: str) -> None:
    """Замена всего содержимого элемента одним текстовым узлом"""
    for child in list(element):
        element.remove(child)
    element.text = value


def content_hash(content: str) -> str:
    return hashlib.sha256(content.encode("utf-8")).hexdigest()


class ParsedTreeCache:
    """LRU-кэш разобранных деревьев для массового поиска.

    Ключ включает хэш содержимого, поэтому измененный документ никогда
    не получит старое дерево. Деревья из кэша только читаются.
    """

    def __init__(self, max_size: int = 256):
        self.max_size = max_size
        self._entries: "OrderedDict[Tuple[int, str], etree._ElementTree]" = OrderedDict()

    @property
    def enabled(self) -> bool:
        return self.max_size > 0

    def get_tree(self, document_id: Optional[int], content: str) -> etree._ElementTree:
        """Дерево документа из кэша или свежий разбор"""
        if not self.enabled or document_id is None:
            return parse_xml(content, document_id=document_id)

        key = (document_id, content_hash(content))
        tree = self._entries.get(key)
        if tree is not None:
            self._entries.move_to_end(key)
            return tree

        tree = parse_xml(content, document_id=document_id)
        self._entries[key] = tree
        if len(self._entries) > self.max_size:
            self._entries.popitem(last=False)
        return tree

    def invalidate(self, document_id: int) -> None:
        for key in [k for k in self._entries if k[0] == document_id]:
            del self._entries[key]

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
