"""Language resolution from an explicit name or a file path."""

from __future__ import annotations

from pathlib import PurePath

from pygments.lexers import find_lexer_class_by_name, find_lexer_class_for_filename
from pygments.util import ClassNotFound

from difftide.runtime_logging import get_runtime_logger

PLAIN_TEXT = "text"


def is_known_language(name: str) -> bool:
    try:
        find_lexer_class_by_name(name)
    except ClassNotFound:
        return False
    return True


def resolve_lang(lang: str | None = None, file_path: str | None = None) -> str:
    if lang and is_known_language(lang):
        return lang

    if file_path:
        suffix = PurePath(file_path).suffix.lstrip(".")
        if suffix and is_known_language(suffix):
            return suffix
        lexer_cls = find_lexer_class_for_filename(file_path)
        if lexer_cls is not None and lexer_cls.aliases:
            return lexer_cls.aliases[0]

    get_runtime_logger().debug("language.fallback", lang=lang, file_path=file_path)
    return PLAIN_TEXT
