"""Tests for manual entry loading."""

from __future__ import annotations

import json

from aero_news.input.manual import load_manual_entries, parse_manual_entry


def test_loads_articles_wrapper(tmp_path):
    path = tmp_path / "manual.json"
    path.write_text(
        json.dumps(
            {
                "articles": [
                    {"headline": "Kept", "url": "https://m.example/1", "priority": "HIGH", "takeaway": "Preset."},
                    {"headline": "No url"},
                    {"url": "https://m.example/no-headline"},
                    "not an object",
                ]
            }
        ),
        encoding="utf-8",
    )

    entries = load_manual_entries(path)

    assert len(entries) == 1
    assert entries[0].headline == "Kept"
    assert entries[0].priority == "high"
    assert entries[0].takeaway == "Preset."


def test_loads_bare_list_and_yaml(tmp_path):
    json_path = tmp_path / "manual.json"
    json_path.write_text(json.dumps([{"headline": "A", "url": "https://m.example/a"}]), encoding="utf-8")
    yaml_path = tmp_path / "manual.yaml"
    yaml_path.write_text("articles:\n  - headline: B\n    url: https://m.example/b\n", encoding="utf-8")

    assert [e.headline for e in load_manual_entries(json_path)] == ["A"]
    assert [e.headline for e in load_manual_entries(yaml_path)] == ["B"]


def test_missing_file_is_empty(tmp_path, caplog):
    assert load_manual_entries(tmp_path / "absent.json") == []
    assert "No manual entries file" in caplog.text


def test_corrupt_file_is_empty(tmp_path):
    path = tmp_path / "manual.json"
    path.write_text("{broken", encoding="utf-8")

    assert load_manual_entries(path) == []


def test_parse_manual_entry_defaults():
    entry = parse_manual_entry({"headline": "  Title  ", "url": "https://m.example/x"})

    assert entry.headline == "Title"
    assert entry.priority == "normal"
    assert entry.source is None
    assert entry.blurb == ""
