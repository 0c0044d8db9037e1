import pytest

from gitemoji.indexer import build_index
from gitemoji.models import ContextEntry, Dataset, Emoji
from gitemoji.scorer import DEFAULT_WEIGHTS, Weights, score_message, suggest
from gitemoji.storage import load_default_dataset, parse_dataset


def _rocket_index(word=None, version="v2"):
    data = {
        "emoji": {"rocket": {"id": "rocket", "s": "🚀"}},
        "context": {version: [{"keyword": ["launch"], "emoji": ["rocket"]}]},
        "word": word or {},
    }
    dataset = parse_dataset(data)
    return dataset, build_index(dataset, version)


def test_default_weights():
    assert DEFAULT_WEIGHTS.substring == 1
    assert DEFAULT_WEIGHTS.whole_word_default == 5
    assert DEFAULT_WEIGHTS.by_tag == {"verb": 10, "acronym": 20, "abbreviation": 20}


def test_whole_word_plus_substring():
    dataset, index = _rocket_index(version="v1")
    rocket = dataset.emoji["rocket"]
    assert score_message("we launch today", index) == [(rocket, 6)]
    assert suggest("we launch today", index) == [rocket]


def test_verb_tag_raises_whole_word_weight():
    dataset, index = _rocket_index({"launch": {"tag": ["verb"]}}, version="v1")
    assert score_message("we launch today", index) == [(dataset.emoji["rocket"], 11)]


def test_tag_weights_are_summed():
    dataset, index = _rocket_index({"launch": {"tag": ["acronym", "abbreviation"]}}, version="v1")
    assert score_message("launch", index) == [(dataset.emoji["rocket"], 41)]


def test_unknown_tag_falls_back_to_default():
    dataset, index = _rocket_index({"launch": {"tag": ["noun"]}}, version="v1")
    assert score_message("launch", index) == [(dataset.emoji["rocket"], 6)]


def test_each_occurrence_counts():
    dataset, index = _rocket_index(version="v1")
    # two whole-word matches, one substring match
    assert score_message("launch, LAUNCH", index) == [(dataset.emoji["rocket"], 11)]


def test_synonym_matches_only_when_enhanced():
    word = {"launch": {"cover": ["blastoff"]}}
    dataset, index = _rocket_index(word, version="v2")
    assert suggest("blastoff now", index) == [dataset.emoji["rocket"]]

    _, plain = _rocket_index(word, version="v1")
    assert suggest("blastoff now", plain) == []


def test_substring_without_word_boundary():
    dataset, index = _rocket_index(version="v1")
    assert score_message("prelaunching", index) == [(dataset.emoji["rocket"], 1)]


@pytest.mark.parametrize("message", ["", " ", "   \t\n"])
def test_blank_message(message):
    _, index = _rocket_index()
    assert suggest(message, index) == []


def test_unknown_words_contribute_nothing():
    _, index = _rocket_index()
    assert score_message("nothing to see here", index) == []


def test_non_string_message():
    _, index = _rocket_index()
    assert score_message(None, index) == []  # type: ignore[arg-type]


def test_ties_are_broken_by_id():
    zebra = Emoji("zebra", "🦓")
    ant = Emoji("ant", "🐜")
    moth = Emoji("moth", "🦋")
    dataset = Dataset(
        emoji={"zebra": zebra, "ant": ant, "moth": moth},
        contexts={"v1": [ContextEntry(["animal"], [zebra, moth, ant])]},
    )
    index = build_index(dataset, "v1")
    first = suggest("animal", index)
    assert first == [ant, moth, zebra]
    for _ in range(5):
        assert suggest("animal", index) == first


def test_higher_score_ranks_first():
    rocket = Emoji("rocket", "🚀")
    bug = Emoji("bug", "🐛")
    dataset = Dataset(
        emoji={"rocket": rocket, "bug": bug},
        contexts={"v1": [
            ContextEntry(["launch"], [rocket]),
            ContextEntry(["fix"], [bug]),
        ]},
    )
    index = build_index(dataset, "v1")
    ranked = score_message("fix fix launch", index)
    assert ranked == [(bug, 11), (rocket, 6)]


def test_custom_weights():
    dataset, index = _rocket_index({"launch": {"tag": ["verb"]}}, version="v1")
    weights = Weights(substring=0, whole_word_default=1, by_tag={"verb": 3})
    assert score_message("launch", index, weights) == [(dataset.emoji["rocket"], 3)]


def test_weights_for_word():
    assert DEFAULT_WEIGHTS.for_word([]) == 5
    assert DEFAULT_WEIGHTS.for_word(["verb"]) == 10
    assert DEFAULT_WEIGHTS.for_word(["verb", "acronym"]) == 30


def test_default_dataset_suggestions():
    dataset = load_default_dataset()
    index = build_index(dataset, "v2")
    emojis = suggest("Fix crash when deploying the release", index)
    assert emojis[0] is dataset.emoji["rocket"]
    assert dataset.emoji["bug"] in emojis

    acronym = suggest("wip", index)
    assert acronym[0] is dataset.emoji["construction"]
