"""Projection of a translation onto its searchable strings.

Everything a user could recognise on screen ends up in the list: the
headword, its verb forms, definitions, every pronunciation, every example
(text, romanization, translation), synonyms, and idioms and phrasal verbs
together with their own examples. No relevance filtering happens here;
ranking is the search engine's job.
"""

from typing import Iterable, Iterator, Union

from lexhistory.core import (
    DictionaryEntry,
    ExampleSentence,
    HistoryEntry,
    Meaning,
    SentenceTranslation,
)


def _example_fields(examples: Iterable[ExampleSentence]) -> Iterator[str]:
    for example in examples:
        yield example.text
        if example.pronunciation:
            yield example.pronunciation
        if example.translation:
            yield example.translation


def _pronunciation_fields(meaning: Meaning) -> Iterator[str]:
    if isinstance(meaning.pronunciation, str):
        yield meaning.pronunciation
        return
    for variant in meaning.pronunciation.values():
        yield from variant.ipa


def _meaning_fields(meaning: Meaning) -> Iterator[str]:
    yield meaning.definition
    yield from _pronunciation_fields(meaning)
    yield from _example_fields(meaning.examples)

    if meaning.synonyms:
        yield from meaning.synonyms.items

    if meaning.idioms:
        for idiom in meaning.idioms.items:
            yield idiom.idiom
            yield idiom.meaning
            yield from _example_fields(idiom.examples)

    if meaning.phrasal_verbs:
        for phrasal_verb in meaning.phrasal_verbs.items:
            yield phrasal_verb.phrasal_verb
            yield phrasal_verb.meaning
            yield from _example_fields(phrasal_verb.examples)


def extract_search_fields(
    item: Union[HistoryEntry, DictionaryEntry, SentenceTranslation]
) -> list[str]:
    """Flatten a translation (or the translation of an entry) to strings.

    Pure: the result depends only on translation content, never on id,
    timestamps or pin state.
    """
    translation = item.translation if isinstance(item, HistoryEntry) else item

    if isinstance(translation, DictionaryEntry):
        fields = [translation.word]
        if translation.verb_forms:
            fields.extend(translation.verb_forms)
        for meaning in translation.meanings:
            fields.extend(_meaning_fields(meaning))
        return fields

    if isinstance(translation, SentenceTranslation):
        return [translation.text, translation.translation]

    raise TypeError(f"Unsupported translation type: {type(translation).__name__}")
