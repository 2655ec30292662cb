from __future__ import annotations

from incident_explorer.filters.highlight import MentionFinder
from incident_explorer.pipeline import build_dataset
from incident_explorer.tasks.entity_graph import EntityCatalog


def test_mentions_resolve_aliases(alias_text: str) -> None:
    dataset = build_dataset(alias_text)
    finder = MentionFinder(dataset.entities)
    b2 = dataset.report_by_id("B2")
    found = [(m.text, m.entity) for m in finder.find(b2.description)]
    assert found == [("Sofrygin", "Pyotr Sofrygin"), ("Yazid Bafaba", "Yazid Bafaba")]


def test_longest_name_wins() -> None:
    finder = MentionFinder(EntityCatalog(["Boris Bugarov"]))
    (mention,) = finder.find("Agent Boris Bugarov arrived.")
    assert mention.text == "Boris Bugarov"
    assert (mention.start, mention.end) == (6, 19)


def test_word_boundaries_and_special_characters() -> None:
    finder = MentionFinder(EntityCatalog(["Fahd al Badawi"], ["A+B Corp"]))
    text = "Dr. Badawi and A+B Corp, not Dr. Badawiya."
    assert [(m.text, m.entity) for m in finder.find(text)] == [
        ("Dr. Badawi", "Fahd al Badawi"),
        ("A+B Corp", "A+B Corp"),
    ]


def test_aliases_of_uncataloged_names_are_ignored() -> None:
    finder = MentionFinder(EntityCatalog(["Alice"]))
    assert finder.find("Boris met Alice")[0].entity == "Alice"
    assert len(finder.find("Boris met Alice")) == 1


def test_empty_catalog_finds_nothing() -> None:
    assert MentionFinder(EntityCatalog()).find("Anything") == []
