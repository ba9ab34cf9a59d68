"""Tests for RSS/Atom/RDF item extraction and normalization."""

from __future__ import annotations

from datetime import datetime, timezone

import xmltodict

from aero_news.core.normalizer import extract_items, normalize_document, normalize_item, parse_date
from aero_news.core.text import generate_id
from aero_news.core.types import FeedSource

NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)
FEED = FeedSource(name="AVweb", url="https://avweb.example/feed", category="general-aviation")


RSS_TWO_ITEMS = """<?xml version="1.0"?>
<rss version="2.0" xmlns:content="http://purl.org/rss/1.0/modules/content/">
  <channel>
    <title>AVweb</title>
    <item>
      <title>Cirrus delivers 10,000th SR &amp;amp; celebrates - AVweb</title>
      <link>https://avweb.example/cirrus</link>
      <description><![CDATA[<p>The <b>milestone</b> aircraft</p>]]></description>
      <pubDate>Fri, 17 Oct 2026 10:30:00 GMT</pubDate>
    </item>
    <item>
      <title>Airport curfew extended</title>
      <link>https://avweb.example/curfew</link>
      <content:encoded>Night operations remain limited.</content:encoded>
      <pubDate>not a date</pubDate>
    </item>
  </channel>
</rss>"""

RSS_ONE_ITEM = """<rss version="2.0"><channel><title>x</title>
  <item><title>Only story</title><link>https://avweb.example/only</link></item>
</channel></rss>"""

ATOM_FEED = """<feed xmlns="http://www.w3.org/2005/Atom">
  <title>Aero Atom</title>
  <entry>
    <title type="html">eVTOL certification step</title>
    <link rel="self" type="application/atom+xml" href="https://atom.example/self"/>
    <link rel="alternate" type="text/html" href="https://atom.example/evtol"/>
    <summary>Air taxi maker clears a milestone.</summary>
    <updated>2026-10-16T08:00:00Z</updated>
  </entry>
</feed>"""

RDF_FEED = """<rdf:RDF xmlns:rdf="http://www.w3.org/1999/02/22-rdf-syntax-ns#"
         xmlns="http://purl.org/rss/1.0/" xmlns:dc="http://purl.org/dc/elements/1.1/">
  <channel><title>RDF</title></channel>
  <item>
    <title>Drone rules updated</title>
    <link>https://rdf.example/drones</link>
    <description>UAS operators get new guidance.</description>
    <dc:date>2026-10-15T09:15:00+02:00</dc:date>
  </item>
  <item>
    <title>Second RDF item</title>
    <link>https://rdf.example/second</link>
  </item>
</rdf:RDF>"""


def test_rss_items_are_normalized():
    articles = normalize_document(xmltodict.parse(RSS_TWO_ITEMS), FEED, NOW)

    assert len(articles) == 2
    first, second = articles
    assert first.headline == "Cirrus delivers 10,000th SR & celebrates"
    assert first.blurb == "The milestone aircraft"
    assert first.source.name == "AVweb"
    assert first.source.url == "https://avweb.example/cirrus"
    assert first.category == "general-aviation"
    assert first.published_at == datetime(2026, 10, 17, 10, 30, tzinfo=timezone.utc)
    assert first.takeaway is None
    assert second.blurb == "Night operations remain limited."
    assert "airport" in second.keywords


def test_unparseable_date_falls_back_to_now():
    articles = normalize_document(xmltodict.parse(RSS_TWO_ITEMS), FEED, NOW)
    assert articles[1].published_at == NOW


def test_single_item_feed_is_wrapped():
    document = xmltodict.parse(RSS_ONE_ITEM)
    assert isinstance(document["rss"]["channel"]["item"], dict)

    items = extract_items(document)
    assert len(items) == 1
    assert normalize_item(items[0], FEED, NOW).source.url == "https://avweb.example/only"


def test_atom_prefers_html_link():
    articles = normalize_document(xmltodict.parse(ATOM_FEED), FEED, NOW)

    assert len(articles) == 1
    article = articles[0]
    assert article.headline == "eVTOL certification step"
    assert article.source.url == "https://atom.example/evtol"
    assert article.blurb == "Air taxi maker clears a milestone."
    assert article.published_at == datetime(2026, 10, 16, 8, 0, tzinfo=timezone.utc)


def test_atom_single_link_object():
    item = {"title": "One link", "link": {"@href": "https://atom.example/one", "@rel": "alternate"}}
    assert normalize_item(item, FEED, NOW).source.url == "https://atom.example/one"


def test_atom_link_list_without_html_uses_first():
    item = {
        "title": "Feeds only",
        "link": [
            {"@href": "https://atom.example/a.xml", "@type": "application/atom+xml"},
            {"@href": "https://atom.example/b.xml", "@type": "application/rss+xml"},
        ],
    }
    assert normalize_item(item, FEED, NOW).source.url == "https://atom.example/a.xml"


def test_rdf_items_are_normalized():
    articles = normalize_document(xmltodict.parse(RDF_FEED), FEED, NOW)

    assert [a.source.url for a in articles] == ["https://rdf.example/drones", "https://rdf.example/second"]
    assert articles[0].published_at == datetime(2026, 10, 15, 7, 15, tzinfo=timezone.utc)
    assert articles[1].published_at == NOW


def test_missing_title_uses_placeholder_and_stable_id():
    item = {"link": "https://avweb.example/untitled"}
    article = normalize_item(item, FEED, NOW)

    assert article.headline == "Untitled"
    assert article.id == generate_id("Untitled", "https://avweb.example/untitled")
    assert normalize_item(item, FEED, NOW).id == article.id


def test_unknown_shapes_yield_no_items():
    assert extract_items(None) == []
    assert extract_items({"html": {"body": "nope"}}) == []
    assert extract_items({"rss": {"channel": {"title": "empty"}}}) == []


def test_parse_date_variants():
    assert parse_date("Fri, 17 Oct 2026 10:30:00 +0200", NOW) == datetime(2026, 10, 17, 8, 30, tzinfo=timezone.utc)
    assert parse_date("2026-10-17T10:30:00Z", NOW) == datetime(2026, 10, 17, 10, 30, tzinfo=timezone.utc)
    assert parse_date("", NOW) == NOW
    assert parse_date(None, NOW) == NOW
