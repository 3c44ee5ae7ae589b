"""ISO 639 language-code normalization.

Mode files are named with either two-letter (ISO 639-1) or three-letter
(ISO 639-2/3) codes; pair keys always use the three-letter terminology form.
"""

from __future__ import annotations

import re

from apertium_native.exceptions import UnknownLanguageError

PAIR_ARROW = " → "

# Legacy ISO 639-1 codes still produced by older locale data.
_DEPRECATED_ISO1 = {"iw": "he", "in": "id", "ji": "yi"}

ISO1_TO_ISO3: dict[str, str] = {
    "aa": "aar", "ab": "abk", "ae": "ave", "af": "afr", "ak": "aka", "am": "amh",
    "an": "arg", "ar": "ara", "as": "asm", "av": "ava", "ay": "aym", "az": "aze",
    "ba": "bak", "be": "bel", "bg": "bul", "bh": "bih", "bi": "bis", "bm": "bam",
    "bn": "ben", "bo": "bod", "br": "bre", "bs": "bos",
    "ca": "cat", "ce": "che", "ch": "cha", "co": "cos", "cr": "cre", "cs": "ces",
    "cu": "chu", "cv": "chv", "cy": "cym",
    "da": "dan", "de": "deu", "dv": "div", "dz": "dzo",
    "ee": "ewe", "el": "ell", "en": "eng", "eo": "epo", "es": "spa", "et": "est",
    "eu": "eus",
    "fa": "fas", "ff": "ful", "fi": "fin", "fj": "fij", "fo": "fao", "fr": "fra",
    "fy": "fry",
    "ga": "gle", "gd": "gla", "gl": "glg", "gn": "grn", "gu": "guj", "gv": "glv",
    "ha": "hau", "he": "heb", "hi": "hin", "ho": "hmo", "hr": "hrv", "ht": "hat",
    "hu": "hun", "hy": "hye", "hz": "her",
    "ia": "ina", "id": "ind", "ie": "ile", "ig": "ibo", "ii": "iii", "ik": "ipk",
    "io": "ido", "is": "isl", "it": "ita", "iu": "iku",
    "ja": "jpn", "jv": "jav",
    "ka": "kat", "kg": "kon", "ki": "kik", "kj": "kua", "kk": "kaz", "kl": "kal",
    "km": "khm", "kn": "kan", "ko": "kor", "kr": "kau", "ks": "kas", "ku": "kur",
    "kv": "kom", "kw": "cor", "ky": "kir",
    "la": "lat", "lb": "ltz", "lg": "lug", "li": "lim", "ln": "lin", "lo": "lao",
    "lt": "lit", "lu": "lub", "lv": "lav",
    "mg": "mlg", "mh": "mah", "mi": "mri", "mk": "mkd", "ml": "mal", "mn": "mon",
    "mr": "mar", "ms": "msa", "mt": "mlt", "my": "mya",
    "na": "nau", "nb": "nob", "nd": "nde", "ne": "nep", "ng": "ndo", "nl": "nld",
    "nn": "nno", "no": "nor", "nr": "nbl", "nv": "nav", "ny": "nya",
    "oc": "oci", "oj": "oji", "om": "orm", "or": "ori", "os": "oss",
    "pa": "pan", "pi": "pli", "pl": "pol", "ps": "pus", "pt": "por",
    "qu": "que",
    "rm": "roh", "rn": "run", "ro": "ron", "ru": "rus", "rw": "kin",
    "sa": "san", "sc": "srd", "sd": "snd", "se": "sme", "sg": "sag", "si": "sin",
    "sk": "slk", "sl": "slv", "sm": "smo", "sn": "sna", "so": "som", "sq": "sqi",
    "sr": "srp", "ss": "ssw", "st": "sot", "su": "sun", "sv": "swe", "sw": "swa",
    "ta": "tam", "te": "tel", "tg": "tgk", "th": "tha", "ti": "tir", "tk": "tuk",
    "tl": "tgl", "tn": "tsn", "to": "ton", "tr": "tur", "ts": "tso", "tt": "tat",
    "tw": "twi", "ty": "tah",
    "ug": "uig", "uk": "ukr", "ur": "urd", "uz": "uzb",
    "ve": "ven", "vi": "vie", "vo": "vol",
    "wa": "wln", "wo": "wol",
    "xh": "xho",
    "yi": "yid", "yo": "yor",
    "za": "zha", "zh": "zho", "zu": "zul",
}

ISO3_TO_ISO1: dict[str, str] = {v: k for k, v in ISO1_TO_ISO3.items()}

_CODE_RE = re.compile(r"^[a-z]{2,3}$")


def _language_part(code: str) -> str:
    raw = str(code or "").strip().lower()
    # "pt-BR", "zh_Hans" -> "pt", "zh"
    return re.split(r"[-_]", raw, maxsplit=1)[0]


def normalize_language(code: str) -> str:
    """Return the three-letter ISO 639 code for `code`.

    Three-letter codes are returned unchanged (lower-cased).
    """
    lang = _language_part(code)
    if not _CODE_RE.match(lang):
        raise UnknownLanguageError(str(code))
    if len(lang) == 3:
        return lang
    lang = _DEPRECATED_ISO1.get(lang, lang)
    try:
        return ISO1_TO_ISO3[lang]
    except KeyError:
        raise UnknownLanguageError(str(code)) from None


def to_iso1(code: str) -> str:
    """Two-letter form of `code` where one exists, else the three-letter form."""
    iso3 = normalize_language(code)
    return ISO3_TO_ISO1.get(iso3, iso3)


def pair_key(source_language: str, target_language: str) -> str:
    """Canonical registry key, e.g. ``pair_key("en", "es") == "eng → spa"``."""
    return normalize_language(source_language) + PAIR_ARROW + normalize_language(target_language)
