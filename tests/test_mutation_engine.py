import pytest

from xmlstore.domains.documents.entities import MutationRequest
from xmlstore.domains.documents.exceptions import (
    AmbiguousTargetError, InvalidValueError, InvalidXPathError, TargetNotFoundError, XmlParseError
)
from xmlstore.domains.documents.mutation_engine import MutationEngine
from xmlstore.domains.documents.xml_model import parse_xml, serialize_xml


class TestMutationEngine:
    @pytest.fixture
    def engine(self):
        return MutationEngine()

    def test_replaces_element_text(self, engine):
        content = "<root><settings><value>oldValue</value></settings></root>"
        result = engine.apply(content, MutationRequest("/root/settings/value", "newValue"))
        assert "<value>newValue</value>" in result
        assert "oldValue" not in result

    def test_zero_matches_raise_target_not_found(self, engine):
        with pytest.raises(TargetNotFoundError) as exc_info:
            engine.apply("<root><item>value</item></root>", MutationRequest("/root/nonexistentNode", "new"), document_id=3)
        assert exc_info.value.xpath == "/root/nonexistentNode"
        assert exc_info.value.document_id == 3

    def test_first_match_wins(self, engine):
        result = engine.apply("<root><item>a</item><item>b</item></root>", MutationRequest("/root/item", "x"))
        assert result == "<root><item>x</item><item>b</item></root>"

    def test_ambiguous_expression_rejected_when_configured(self):
        engine = MutationEngine(reject_ambiguous=True)
        with pytest.raises(AmbiguousTargetError) as exc_info:
            engine.apply("<root><item>a</item><item>b</item></root>", MutationRequest("//item", "x"))
        assert exc_info.value.match_count == 2

    def test_single_match_allowed_when_rejecting_ambiguous(self):
        engine = MutationEngine(reject_ambiguous=True)
        result = engine.apply("<root><item>a</item></root>", MutationRequest("//item", "x"))
        assert result == "<root><item>x</item></root>"

    def test_child_markup_is_discarded(self, engine):
        result = engine.apply("<root><a><b>1</b><c/></a></root>", MutationRequest("/root/a", "z"))
        assert result == "<root><a>z</a></root>"

    def test_predicate_selects_target(self, engine):
        content = "<root><item id='1'>a</item><item id='2'>b</item></root>"
        result = engine.apply(content, MutationRequest("/root/item[@id='2']", "B"))
        assert result == '<root><item id="1">a</item><item id="2">B</item></root>'

    def test_attribute_target_updates_value(self, engine):
        result = engine.apply("<root><item id='old'/></root>", MutationRequest("/root/item/@id", "new"))
        assert result == '<root><item id="new"/></root>'

    def test_text_node_is_not_a_target(self, engine):
        with pytest.raises(TargetNotFoundError):
            engine.apply("<root><v>1<x/>2</v></root>", MutationRequest("/root/v/text()", "z"))

    def test_comment_is_not_a_target(self, engine):
        with pytest.raises(TargetNotFoundError):
            engine.apply("<root><!-- c --></root>", MutationRequest("/root/comment()", "z"))

    @pytest.mark.parametrize("xpath", ["/root/v", "/root/v/@id"])
    def test_control_characters_are_rejected(self, engine, xpath):
        with pytest.raises(InvalidValueError) as exc_info:
            engine.apply("<root><v id='1'>1</v></root>", MutationRequest(xpath, "a\x01b"))
        assert exc_info.value.code == "INVALID_VALUE"
        assert exc_info.value.xpath == xpath

    def test_declared_encoding_does_not_corrupt_text(self, engine):
        content = '<?xml version="1.0" encoding="ISO-8859-1"?><root><v>café</v><w>1</w></root>'
        result = engine.apply(content, MutationRequest("/root/w", "2"))
        assert result == "<root><v>café</v><w>2</w></root>"

    def test_wildcard_path(self, engine):
        result = engine.apply("<root><a><v>1</v></a></root>", MutationRequest("/root/*/v", "2"))
        assert result == "<root><a><v>2</v></a></root>"

    def test_value_is_plain_text(self, engine):
        result = engine.apply("<root><v/></root>", MutationRequest("/root/v", "<b>&</b>"))
        assert result == "<root><v>&lt;b&gt;&amp;&lt;/b&gt;</v></root>"
        assert parse_xml(result).getroot().find("v").text == "<b>&</b>"

    def test_result_is_well_formed_and_stable(self, engine):
        result = engine.apply("<root><v>1</v></root>", MutationRequest("/root/v", "2"))
        assert serialize_xml(parse_xml(result)) == result

    def test_same_value_is_idempotent(self, engine):
        request = MutationRequest("/root/v", "2")
        once = engine.apply("<root><v>1</v></root>", request)
        assert engine.apply(once, request) == once

    @pytest.mark.parametrize("xpath", ["/root/[", "//item[", "bogus:item"])
    def test_invalid_xpath(self, engine, xpath):
        with pytest.raises(InvalidXPathError):
            engine.apply("<root><item/></root>", MutationRequest(xpath, "x"))

    def test_non_node_result_is_rejected(self, engine):
        with pytest.raises(InvalidXPathError):
            engine.apply("<root><item/></root>", MutationRequest("count(/root/item)", "x"))

    def test_malformed_content(self, engine):
        with pytest.raises(XmlParseError):
            engine.apply("<root><item></root>", MutationRequest("/root/item", "x"))
