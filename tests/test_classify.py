import pytest

from history_atlas.classify import (
    DEFAULT_CLASS,
    ClassRule,
    Classifier,
    VisualClass,
    classifier_from_config,
    default_classifier,
)

HUMAN = VisualClass("human", "#e74c3c")
ANIMAL = VisualClass("animal", "#27ae60")


def test_default_table():
    classifier = default_classifier()
    assert classifier.classify("human migration").name == "human"
    assert classifier.classify("人类迁徙").name == "human"
    assert classifier.classify("动物驯化").name == "animal"
    assert classifier.classify("Plant domestication").name == "plant"
    assert classifier.classify("pathogen spread").name == "pathogen"


@pytest.mark.parametrize("category", [None, "", "trade"])
def test_fallback_to_default(category):
    assert default_classifier().classify(category) == DEFAULT_CLASS


def test_first_matching_rule_wins():
    forward = Classifier([ClassRule("human", HUMAN), ClassRule("animal", ANIMAL)])
    backward = Classifier([ClassRule("animal", ANIMAL), ClassRule("human", HUMAN)])
    assert forward.classify("human and animal contact") == HUMAN
    assert backward.classify("human and animal contact") == ANIMAL


def test_default_table_precedence_human_before_pathogen():
    assert default_classifier().classify("human disease").name == "human"


def test_case_sensitive_rule():
    rule = ClassRule("Human", HUMAN, ignore_case=False)
    assert Classifier([rule]).classify("human") == DEFAULT_CLASS


def test_invalid_pattern():
    with pytest.raises(ValueError):
        ClassRule("(", HUMAN)


def test_classifier_from_config_preserves_order():
    classifier = classifier_from_config(
        [
            {"pattern": "ship", "name": "sea", "color": "#00f"},
            {"pattern": "trade", "name": "trade", "color": "#0f0"},
        ],
        {"name": "misc", "color": "#999"},
    )
    assert classifier.classify("trade ship").name == "sea"
    assert classifier.classify("caravan") == VisualClass("misc", "#999")
    assert [c.name for c in classifier.legend()] == ["sea", "trade", "misc"]


def test_classifier_from_config_defaults_and_errors():
    assert classifier_from_config(None).classify("human").name == "human"
    with pytest.raises(ValueError):
        classifier_from_config([{"pattern": "x", "name": "x"}])
    with pytest.raises(ValueError):
        classifier_from_config(["x"])
