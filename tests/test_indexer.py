import pytest

from gitemoji.indexer import (
    build_index,
    enhanced_keywords,
    plain_keywords,
    strategy_for,
)
from gitemoji.models import ContextEntry, Dataset, Emoji
from gitemoji.storage import DatasetError, load_default_dataset, parse_dataset


def _assert_inverse(index):
    for keyword, emojis in index.keyword2emoji.items():
        for emoji in emojis:
            assert keyword in index.emoji2keyword[emoji]
    for emoji, keywords in index.emoji2keyword.items():
        for keyword in keywords:
            assert emoji in index.keyword2emoji[keyword]


def test_plain_index(rocket_dataset):
    index = build_index(rocket_dataset, "v1")
    rocket = rocket_dataset.emoji["rocket"]
    bug = rocket_dataset.emoji["bug"]
    assert index.version == "v1"
    assert index.keyword2emoji == {"launch": {rocket}, "fix": {bug}, "bug": {bug}}
    assert index.emoji2keyword[rocket] == {"launch"}
    assert "blastoff" not in index.keyword2emoji


def test_enhanced_index_adds_cover_and_ids(rocket_dataset):
    index = build_index(rocket_dataset, "v2")
    rocket = rocket_dataset.emoji["rocket"]
    assert index.keyword2emoji["blastoff"] == {rocket}
    assert index.keyword2emoji["rocket"] == {rocket}
    assert index.emoji2keyword[rocket] == {"launch", "blastoff", "rocket"}


def test_every_catalog_emoji_is_listed(rocket_dataset):
    for version in ("v1", "v2"):
        index = build_index(rocket_dataset, version)
        memo = rocket_dataset.emoji["memo"]
        assert set(index.emoji2keyword) == set(rocket_dataset.emoji.values())
        assert index.emoji2keyword[memo] == set()


def test_keyword2tag_covers_word_families(rocket_dataset):
    index = build_index(rocket_dataset, "v1")
    assert index.keyword2tag["docs"] == {"abbreviation"}
    assert index.keyword2tag["doc"] == {"abbreviation"}
    # tagged even though no context entry references it
    assert "docs" not in index.keyword2emoji
    assert index.keyword2tag["launch"] == set()


def test_duplicate_keywords_accumulate(rocket_data):
    rocket_data["context"]["v1"].append({"keyword": ["launch"], "emoji": ["memo"]})
    dataset = parse_dataset(rocket_data)
    index = build_index(dataset, "v1")
    assert index.keyword2emoji["launch"] == {dataset.emoji["rocket"], dataset.emoji["memo"]}


def test_blank_keywords_are_skipped():
    rocket = Emoji("rocket", "🚀")
    dataset = Dataset(
        emoji={"rocket": rocket},
        contexts={"v1": [ContextEntry(["  ", "Launch"], [rocket])]},
    )
    index = build_index(dataset, "v1")
    assert "" not in index.keyword2emoji
    assert index.keyword2emoji == {"launch": {rocket}}


def test_foreign_emoji_fails_fast():
    rocket = Emoji("rocket", "🚀")
    dataset = Dataset(
        emoji={"rocket": rocket},
        contexts={"v1": [ContextEntry(["launch"], [Emoji("rocket", "🚀")])]},
    )
    with pytest.raises(DatasetError):
        build_index(dataset, "v1")


def test_unknown_version(rocket_dataset):
    with pytest.raises(ValueError):
        build_index(rocket_dataset, "v3")
    with pytest.raises(ValueError):
        strategy_for("v3")


def test_custom_strategy(rocket_dataset):
    index = build_index(rocket_dataset, "v1", strategy=enhanced_keywords)
    assert "blastoff" in index.keyword2emoji


def test_strategies_by_version():
    assert strategy_for("v1") is plain_keywords
    assert strategy_for("v2") is enhanced_keywords


def test_enhanced_keywords_without_word_entry():
    bug = Emoji("bug", "🐛")
    entry = ContextEntry(["Crash"], [bug])
    assert enhanced_keywords(entry, Dataset(emoji={"bug": bug})) == ["Crash", "bug"]


@pytest.mark.parametrize("version", ["v1", "v2"])
def test_index_relations_are_inverse(rocket_dataset, version):
    _assert_inverse(build_index(rocket_dataset, version))


@pytest.mark.parametrize("version", ["v1", "v2"])
def test_default_dataset_index_relations_are_inverse(version):
    dataset = load_default_dataset()
    index = build_index(dataset, version)
    _assert_inverse(index)
    assert len(index.emoji2keyword) == len(dataset.emoji)


def test_missing_corpus_is_a_dataset_error(rocket_data):
    rocket_data["context"] = {"v1": rocket_data["context"]["v1"]}
    dataset = parse_dataset(rocket_data)
    with pytest.raises(DatasetError, match="no context corpus 'v2'"):
        build_index(dataset, "v2")
