"""
Règles de validation d'une œuvre avant envoi.

Chaque champ est associé à une liste de (prédicat, message). La première
règle qui échoue donne le message d'erreur du champ.
"""
import re
from typing import Any, Callable, Dict, List, Mapping, Tuple

from portfolio.client.errors import ValidationError
from portfolio.models.painting import Availability, MAX_YEAR, MIN_YEAR, PaintingBase
from portfolio.utils.string_utils import split_tags

Rule = Tuple[Callable[[Any], bool], str]

AVAILABILITY_VALUES = {a.value for a in Availability}
_TRUE = {"true", "1", "on"}
_FALSE = {"false", "0", "off", ""}


def _is_filled(value) -> bool:
    return isinstance(value, str) and value.strip() != ""


def _to_year(value):
    """Convertit la valeur saisie en entier, None si impossible."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        text = value.strip()
        # au-delà de quelques chiffres ce n'est plus une année
        if re.fullmatch(r"-?\d{1,6}", text):
            return int(text)
    return None


def _to_bool(value):
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE:
            return True
        if text in _FALSE:
            return False
    return None


def _optional_text(value) -> bool:
    return value is None or isinstance(value, str)


RULES: Dict[str, List[Rule]] = {
    "title": [(_is_filled, "Title is required")],
    "year": [
        (lambda v: _to_year(v) is not None, "Year must be a number"),
        (lambda v: MIN_YEAR <= _to_year(v) <= MAX_YEAR,
         f"Year must be between {MIN_YEAR} and {MAX_YEAR}"),
    ],
    "medium": [(_is_filled, "Medium is required")],
    "size": [(_is_filled, "Size is required")],
    "description": [(_optional_text, "Description must be text")],
    "availability": [
        (lambda v: v is None or v in AVAILABILITY_VALUES,
         "Availability must be one of: available, sold, not-for-sale"),
    ],
    "tags": [(_optional_text, "Tags must be text")],
    "featured": [(lambda v: _to_bool(v) is not None, "Featured must be true or false")],
}


def collect_errors(values: Mapping[str, Any]) -> Dict[str, str]:
    errors = {}
    for field, rules in RULES.items():
        value = values.get(field)
        for predicate, message in rules:
            if not predicate(value):
                errors[field] = message
                break
    return errors


def validate_artwork(values: Mapping[str, Any]) -> PaintingBase:
    """
    Valide les valeurs du formulaire et retourne l'œuvre normalisée.
    Lève ValidationError avec toutes les erreurs de champ sinon.
    """
    errors = collect_errors(values)
    if errors:
        raise ValidationError(errors)

    availability = values.get("availability")
    description = (values.get("description") or "").strip()
    tags = ", ".join(split_tags(values.get("tags") or ""))
    return PaintingBase(
        title=values["title"].strip(),
        year=_to_year(values["year"]),
        medium=values["medium"].strip(),
        size=values["size"].strip(),
        description=description or None,
        availability=Availability(availability) if availability else Availability.AVAILABLE,
        tags=tags or None,
        featured=_to_bool(values.get("featured")),
    )
