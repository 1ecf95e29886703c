import pytest

from xmlstore.domains.documents.entities import XmlDocument, SearchCriteria
from xmlstore.domains.documents.exceptions import XmlParseError
from xmlstore.domains.documents.query_engine import matches, search
from xmlstore.domains.documents.xml_model import ParsedTreeCache


def make_doc(doc_id, name, content):
    return XmlDocument(id=doc_id, name=name, content=content)


class TestMatches:
    @pytest.mark.parametrize("content", ["<root/>", "", "<broken"])
    def test_empty_criteria_match_every_document(self, content):
        assert matches(make_doc(1, None, content), SearchCriteria())

    def test_name_is_exact_and_case_sensitive(self):
        doc = make_doc(1, "Doc1", "<root/>")
        assert matches(doc, SearchCriteria(name="Doc1"))
        assert not matches(doc, SearchCriteria(name="doc1"))
        assert not matches(doc, SearchCriteria(name="Doc"))

    def test_missing_name_never_matches_name_criterion(self):
        assert not matches(make_doc(1, None, "<root/>"), SearchCriteria(name="Doc1"))

    def test_name_only_criteria_require_well_formed_content(self):
        with pytest.raises(XmlParseError) as exc_info:
            matches(make_doc(7, "Doc1", "<broken"), SearchCriteria(name="Doc1"))
        assert exc_info.value.document_id == 7

    def test_node_found_at_any_depth(self):
        doc = make_doc(1, None, "<root><a><b><item>1</item></b></a></root>")
        assert matches(doc, SearchCriteria(node="item"))
        assert matches(doc, SearchCriteria(node="root"))
        assert not matches(doc, SearchCriteria(node="value"))

    def test_node_uses_local_name(self):
        doc = make_doc(1, None, '<root xmlns="urn:orders"><ns:item xmlns:ns="urn:x"/></root>')
        assert matches(doc, SearchCriteria(node="item"))

    def test_attribute_presence_ignores_value(self):
        doc = make_doc(1, None, "<root><element key='val'/></root>")
        assert matches(doc, SearchCriteria(attribute="key"))
        assert not matches(doc, SearchCriteria(attribute="val"))

    def test_attribute_value_ignores_name_and_owner(self):
        doc = make_doc(1, None, "<root><item id='unique'/><other ref='x'/></root>")
        assert matches(doc, SearchCriteria(attribute_value="unique"))
        assert matches(doc, SearchCriteria(attribute_value="x"))
        assert not matches(doc, SearchCriteria(attribute_value="uniq"))

    def test_text_is_not_an_attribute_value(self):
        doc = make_doc(1, None, "<root><item>unique</item></root>")
        assert not matches(doc, SearchCriteria(attribute_value="unique"))

    def test_criteria_are_combined(self):
        doc = make_doc(1, "Invoice_2023", "<invoice><item id='A'/></invoice>")
        assert matches(doc, SearchCriteria(name="Invoice_2023", node="item", attribute="id", attribute_value="A"))
        assert not matches(doc, SearchCriteria(name="Invoice_2023", node="product"))
        assert not matches(doc, SearchCriteria(node="item", attribute_value="B"))

    def test_malformed_content_raises_for_structural_criteria(self):
        with pytest.raises(XmlParseError) as exc_info:
            matches(make_doc(5, None, "<root>"), SearchCriteria(node="root"))
        assert exc_info.value.document_id == 5


class TestSearch:
    @pytest.fixture
    def documents(self):
        return [
            make_doc(1, "DocP", "<root><item id='unique'/></root>"),
            make_doc(2, "DocQ", "<root><item id='common'/></root>"),
            make_doc(3, "DocR", "<root><element id='common'/></root>"),
        ]

    def test_attribute_value_returns_only_matching_document(self, documents):
        found = search(documents, SearchCriteria(attribute_value="unique"))
        assert [d.name for d in found] == ["DocP"]

    def test_listing_order_is_preserved(self, documents):
        found = search(documents, SearchCriteria(attribute_value="common"))
        assert [d.id for d in found] == [2, 3]

    def test_no_match_returns_empty_list(self, documents):
        assert search(documents, SearchCriteria(name="NonExistentName")) == []

    def test_malformed_document_is_skipped(self, documents):
        documents.insert(1, make_doc(9, "Broken", "<root><item>"))
        found = search(documents, SearchCriteria(node="item"))
        assert [d.id for d in found] == [1, 2]

    def test_empty_content_is_skipped_for_structural_search(self, documents):
        documents.append(make_doc(10, "Empty", ""))
        found = search(documents, SearchCriteria(node="root"))
        assert [d.id for d in found] == [1, 2, 3]

    def test_fail_fast_aborts_on_malformed_document(self, documents):
        documents.insert(1, make_doc(9, "Broken", "<root><item>"))
        with pytest.raises(XmlParseError) as exc_info:
            search(documents, SearchCriteria(node="item"), fail_fast=True)
        assert exc_info.value.document_id == 9

    def test_name_only_search_skips_malformed_document(self, documents):
        documents.append(make_doc(9, "DocP", "<root><item>"))
        found = search(documents, SearchCriteria(name="DocP"))
        assert [d.id for d in found] == [1]

    def test_fail_fast_checks_documents_with_other_names(self, documents):
        documents.append(make_doc(9, "Broken", "<root><item>"))
        with pytest.raises(XmlParseError) as exc_info:
            search(documents, SearchCriteria(name="DocP", node="item"), fail_fast=True)
        assert exc_info.value.document_id == 9

    def test_cache_does_not_change_results(self, documents):
        cache = ParsedTreeCache(max_size=8)
        criteria = SearchCriteria(node="item", attribute="id")
        first = search(documents, criteria, cache=cache)
        second = search(documents, criteria, cache=cache)
        assert [d.id for d in first] == [d.id for d in second] == [1, 2]
        assert len(cache) == 3
