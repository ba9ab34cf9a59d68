"""Tests for headline/description cleaning and article ids."""

from aero_news.core.text import (
    HEADLINE_PLACEHOLDER,
    clean_description,
    clean_headline,
    decode_entities,
    extract_keywords,
    generate_id,
)


def test_generate_id_matches_known_value():
    assert generate_id("a", "b") == "212u"


def test_generate_id_is_stable_and_input_sensitive():
    first = generate_id("Cirrus SR22 update", "https://example.com/a")
    assert first == generate_id("Cirrus SR22 update", "https://example.com/a")
    assert first != generate_id("Cirrus SR22 update", "https://example.com/b")
    assert first.isalnum() and first == first.lower()


def test_generate_id_handles_non_ascii():
    value = generate_id("Überflug — Zürich ✈", "https://example.com/ü")
    assert value
    assert value == generate_id("Überflug — Zürich ✈", "https://example.com/ü")


def test_decode_entities_named_decimal_and_hex():
    assert decode_entities("Fish &amp; Chips &#8217;s &#x2014; &lt;ok&gt;") == "Fish & Chips ’s — <ok>"


def test_decode_entities_single_pass_and_bare_ampersand():
    assert decode_entities("&amp;amp;") == "&amp;"
    assert decode_entities("R&D spend") == "R&D spend"
    assert decode_entities("") == ""


def test_clean_headline_strips_source_suffix():
    assert clean_headline("FAA proposes new rule - Reuters") == "FAA proposes new rule"
    assert clean_headline("Airbus orders rise | Aviation Week") == "Airbus orders rise"


def test_clean_headline_keeps_model_designators():
    assert clean_headline("F-35 fleet grounded") == "F-35 fleet grounded"
    assert clean_headline("Delivery of 737-800 delayed") == "Delivery of 737-800 delayed"


def test_clean_headline_markup_and_empty():
    assert clean_headline("<b>Big</b>   &amp; bold") == "Big & bold"
    assert clean_headline("") == HEADLINE_PLACEHOLDER
    assert clean_headline("<br/>") == HEADLINE_PLACEHOLDER
    assert clean_headline(None) == HEADLINE_PLACEHOLDER


def test_clean_description_truncates_to_300():
    text = "word " * 100
    cleaned = clean_description(text)
    assert len(cleaned) == 300
    assert cleaned.endswith("...")


def test_clean_description_short_text_untouched():
    assert clean_description("<p>Short&nbsp;note</p>\n\n") == "Short note"
    assert clean_description(None) == ""


def test_extract_keywords_vocabulary_order():
    keywords = extract_keywords("NTSB reviews Boeing incident at the airport")
    assert keywords == ["boeing", "ntsb", "incident", "airport"]
