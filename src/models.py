"""Data classes for family tree members."""

from dataclasses import dataclass
from enum import Enum


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class Language(str, Enum):
    HINDI = "Hindi"
    BENGALI = "Bengali"
    TAMIL = "Tamil"
    TELUGU = "Telugu"
    MARATHI = "Marathi"
    GUJARATI = "Gujarati"
    KANNADA = "Kannada"
    MALAYALAM = "Malayalam"
    PUNJABI = "Punjabi"
    ODIA = "Odia"
    URDU = "Urdu"
    SANSKRIT = "Sanskrit"


LANGUAGE_CODES = {
    Language.HINDI: "hi",
    Language.BENGALI: "bn",
    Language.TAMIL: "ta",
    Language.TELUGU: "te",
    Language.MARATHI: "mr",
    Language.GUJARATI: "gu",
    Language.KANNADA: "kn",
    Language.MALAYALAM: "ml",
    Language.PUNJABI: "pa",
    Language.ODIA: "or",
    Language.URDU: "ur",
    Language.SANSKRIT: "sa",
}

# Offered by the editor; any other label is accepted as-is.
RELATION_TYPES = ("Root", "Son", "Daughter", "Sibling")


@dataclass
class Member:
    id: str
    parent_id: str | None
    name: str
    relation_type: str = "Root"
    gender: Gender = Gender.MALE
    regional_name: str | None = None
    birth_date: str | None = None  # free text, not validated
    death_date: str | None = None
    spouse_name: str | None = None
    spouse_regional_name: str | None = None
    photo_url: str | None = None
