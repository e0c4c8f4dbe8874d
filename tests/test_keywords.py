from __future__ import annotations

from seo_audit.engine.keywords import extract_keywords


def test_ranks_by_frequency():
    text = "Solar panels, solar power! Solar costs and panels."
    keywords = extract_keywords(text)
    assert [k.word for k in keywords] == ["solar", "panels", "power", "costs"]
    assert keywords[0].count == 3


def test_density_uses_all_tokens():
    # 8 tokens, "solar" twice
    keywords = extract_keywords("solar is the best and solar is cheap")
    solar = keywords[0]
    assert solar.word == "solar"
    assert solar.density == 25.0


def test_short_words_and_stop_words_are_dropped():
    words = {k.word for k in extract_keywords("This page will have many words about roofs")}
    assert words == {"page", "words", "roofs"}


def test_ties_keep_first_appearance():
    assert [k.word for k in extract_keywords("zebra apple zebra apple")] == ["zebra", "apple"]


def test_limit():
    text = " ".join(f"word{i:02d}" for i in range(30))
    assert len(extract_keywords(text)) == 20
    assert len(extract_keywords(text, limit=5)) == 5


def test_empty_text():
    assert extract_keywords("") == ()
    assert extract_keywords("   ,,, !!") == ()
