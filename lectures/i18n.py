"""Localised labels and date formatting for exported documents."""

from __future__ import annotations

import datetime
from typing import Dict, Mapping, Tuple

_MONTH_NAMES: Mapping[str, str] = {
    "en": "January February March April May June July August September October November December",
    "it": "Gennaio Febbraio Marzo Aprile Maggio Giugno Luglio Agosto Settembre Ottobre Novembre Dicembre",
    "es": "Enero Febrero Marzo Abril Mayo Junio Julio Agosto Septiembre Octubre Noviembre Diciembre",
    "fr": "Janvier Février Mars Avril Mai Juin Juillet Août Septembre Octobre Novembre Décembre",
    "de": "Januar Februar März April Mai Juni Juli August September Oktober November Dezember",
    "pt": "Janeiro Fevereiro Março Abril Maio Junho Julho Agosto Setembro Outubro Novembre Dezembro",
}

_MONTHS: Mapping[str, Tuple[str, ...]] = {
    language: tuple(names.split()) for language, names in _MONTH_NAMES.items()
}

_LABEL_KEYS: Tuple[str, ...] = (
    "abstract",
    "audio_files",
    "reference_files",
    "page_label",
    "pages_label",
    "hour_label",
    "minute_label",
    "second_label",
    "date_label",
)

# One row per language, values in the order of _LABEL_KEYS.
_LABEL_ROWS: Mapping[str, Tuple[str, ...]] = {
    "en": ("abstract", "Audio Files", "Reference Files",
           "p.", "pp.", "h", "m", "s", "Date"),
    "it": ("sommario", "Registrazioni Audio", "Materiali di Riferimento",
           "p.", "pp.", "o", "m", "s", "Data"),
    "es": ("resumen", "Archivos de Audio", "Materiales de Referencia",
           "pág.", "págs.", "h", "m", "s", "Fecha"),
    "fr": ("résumé", "Fichiers Audio", "Documents de Référence",
           "p.", "pp.", "h", "m", "s", "Date"),
    "de": ("Zusammenfassung", "Audiodateien", "Referenzmaterialien",
           "S.", "S.", "Std.", "Min.", "Sek.", "Datum"),
    "pt": ("resumo", "Arquivos de Áudio", "Materiais de Referência",
           "p.", "pp.", "h", "m", "s", "Data"),
}

_LABELS: Mapping[str, Dict[str, str]] = {
    language: dict(zip(_LABEL_KEYS, row)) for language, row in _LABEL_ROWS.items()
}


def _base_language(language: str) -> str:
    return language.split("-")[0]


def format_localized_date(date: datetime.date, language: str) -> str:
    """Format a date the way the given language writes it."""
    base = _base_language(language)
    months = _MONTHS.get(base, _MONTHS["en"])
    month = months[date.month - 1]

    if base in ("it", "es", "fr", "pt"):
        return f"{date.day} {month} {date.year}"
    if base == "de":
        return f"{date.day}. {month} {date.year}"
    return f"{month} {date.day}, {date.year}"


def get_label(language: str, key: str) -> str:
    """Return the translated label for key, falling back to English."""
    base = _base_language(language or "en")
    label = _LABELS.get(base, {}).get(key)
    if label is not None:
        return label
    return _LABELS["en"].get(key, "")