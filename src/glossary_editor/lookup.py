"""Definition-service replies: shaping, mock fallback, conversion to records.

The service itself (prompting a language model over HTTP) is not part of
this package. A reply is any JSON object of the form::

    {
      "headword": "interest",
      "corrected_to": null,
      "did_you_mean": [],
      "general": {"definition_en": "...", "translation_ja": "..."},
      "domains": [{"domain": "SLA", "definition_en": "...", "translation_ja": "..."}],
      "related_forms": [{"form": "interested", "pos": "adj", "ja_gloss": "..."}]
    }
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from glossary_editor.exceptions import DataImportError
from glossary_editor.models import Record

GENERAL_SENSE = "General"
MAX_SUGGESTIONS = 3
MAX_DOMAINS = 3


@dataclass(frozen=True)
class SenseEntry:
    """One meaning of the headword, general or domain-specific."""

    domain: str
    definition_en: str
    translation_ja: str
    example_en: str = ""
    note: str = ""


@dataclass(frozen=True)
class RelatedForm:
    form: str
    pos: str = ""
    ja_gloss: str = ""


@dataclass(frozen=True)
class LookupResult:
    """A shaped definition-service reply."""

    headword: str
    general: SenseEntry
    corrected_to: str | None = None
    did_you_mean: tuple[str, ...] = ()
    domains: tuple[SenseEntry, ...] = ()
    related_forms: tuple[RelatedForm, ...] = ()
    synonyms: tuple[str, ...] = ()
    antonyms: tuple[str, ...] = ()


def _str(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _str_list(value: Any) -> tuple[str, ...]:
    if not isinstance(value, list):
        return ()
    return tuple(v for v in value if isinstance(v, str) and v)


def _sense(data: Any, domain: str) -> SenseEntry:
    data = data if isinstance(data, Mapping) else {}
    return SenseEntry(
        domain=domain,
        definition_en=_str(data.get("definition_en")),
        translation_ja=_str(data.get("translation_ja")),
        example_en=_str(data.get("example_en")),
        note=_str(data.get("note")),
    )


def shape_lookup_response(raw: Mapping[str, Any], term: str) -> LookupResult:
    """Normalize a raw reply, filling defaults and capping list sizes.

    Raises:
        DataImportError: if *raw* is not a JSON object.
    """
    if not isinstance(raw, Mapping):
        raise DataImportError(f"Lookup reply must be an object, got {type(raw).__name__}")

    domains = []
    for d in raw.get("domains") or []:
        if isinstance(d, Mapping) and d.get("domain") and d.get("definition_en"):
            domains.append(_sense(d, _str(d.get("domain"))))

    related = []
    for r in raw.get("related_forms") or []:
        if isinstance(r, Mapping):
            related.append(RelatedForm(
                form=_str(r.get("form")),
                pos=_str(r.get("pos")),
                ja_gloss=_str(r.get("ja_gloss")) or _str(r.get("ja")),
            ))

    corrected = raw.get("corrected_to")
    return LookupResult(
        headword=_str(raw.get("headword")) or term,
        general=_sense(raw.get("general"), GENERAL_SENSE),
        corrected_to=corrected if isinstance(corrected, str) and corrected else None,
        did_you_mean=_str_list(raw.get("did_you_mean"))[:MAX_SUGGESTIONS],
        domains=tuple(domains[:MAX_DOMAINS]),
        related_forms=tuple(related),
        synonyms=_str_list(raw.get("synonyms")),
        antonyms=_str_list(raw.get("antonyms")),
    )


def mock_lookup(term: str) -> LookupResult:
    """Placeholder reply used when no definition service is configured."""
    term = term.strip()
    return LookupResult(
        headword=term,
        general=SenseEntry(
            domain=GENERAL_SENSE,
            definition_en=f'A concise learner-style meaning of "{term}".',
            translation_ja="簡潔な定義。",
        ),
    )


def load_lookup(source: str | Path, term: str = "") -> LookupResult:
    """Read a saved reply from a JSON file.

    Raises:
        DataImportError: if the file is not valid JSON.
        FileNotFoundError: if the file does not exist.
    """
    path = Path(source)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except ValueError as e:
        raise DataImportError(f"Invalid JSON in {path}: {e}") from e
    return shape_lookup_response(raw, term or path.stem)


def records_from_lookup(
    result: LookupResult,
    senses: list[str] | None = None,
) -> list[Record]:
    """Turn a reply into records: the general sense, then each domain.

    Args:
        senses: keep only these sense labels; None keeps all.
    """
    entries = [result.general, *result.domains]
    return [
        Record(
            word=result.headword,
            sense=e.domain,
            definition_en=e.definition_en,
            translation_ja=e.translation_ja,
            example_en=e.example_en,
            note=e.note,
        )
        for e in entries
        if senses is None or e.domain in senses
    ]
