"""Default transliteration tables used by the demo plugin."""

from __future__ import annotations

ISO9_TABLE: dict[str, str] = {
    "А": "A", "Б": "B", "В": "V", "Г": "G", "Д": "D", "Е": "E", "Ё": "YO", "Ж": "ZH",
    "З": "Z", "И": "I", "Й": "J", "К": "K", "Л": "L", "М": "M", "Н": "N", "О": "O",
    "П": "P", "Р": "R", "С": "S", "Т": "T", "У": "U", "Ф": "F", "Х": "H", "Ц": "CZ",
    "Ч": "CH", "Ш": "SH", "Щ": "SHH", "Ъ": "", "Ы": "Y", "Ь": "", "Э": "E", "Ю": "YU", "Я": "YA",
    "а": "a", "б": "b", "в": "v", "г": "g", "д": "d", "е": "e", "ё": "yo", "ж": "zh",
    "з": "z", "и": "i", "й": "j", "к": "k", "л": "l", "м": "m", "н": "n", "о": "o",
    "п": "p", "р": "r", "с": "s", "т": "t", "у": "u", "ф": "f", "х": "h", "ц": "cz",
    "ч": "ch", "ш": "sh", "щ": "shh", "ъ": "", "ы": "y", "ь": "", "э": "e", "ю": "yu", "я": "ya",
}

UK_TABLE: dict[str, str] = {
    **ISO9_TABLE,
    "Г": "H", "г": "h", "Ґ": "G", "ґ": "g", "Є": "YE", "є": "ye",
    "И": "Y", "и": "y", "І": "I", "і": "i", "Ї": "YI", "ї": "yi",
}

BG_TABLE: dict[str, str] = {
    **ISO9_TABLE,
    "Щ": "STH", "щ": "sth", "Ъ": "A", "ъ": "a", "Ь": "Y", "ь": "y",
}

LOCALE_TABLES: dict[str, tuple[str, dict[str, str]]] = {
    "iso9": ("ISO9 Table", ISO9_TABLE),
    "uk": ("uk Table", UK_TABLE),
    "bg_BG": ("bg_BG Table", BG_TABLE),
}
