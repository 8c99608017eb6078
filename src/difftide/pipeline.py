"""Turn code, and optionally a version to diff against, into render items.

Every call recomputes the alignment from the two full texts it is given, so
a streamed sequence of calls stays self-consistent even when intermediate
chunks are skipped. Nothing is retained between calls.
"""

from __future__ import annotations

from difftide.diff.align import Alignment, align
from difftide.diff.collapse import collapse_unchanged
from difftide.diff.hunks import DiffFunc, diff_lines, diff_words
from difftide.diff.overlay import apply_streaming_overlay
from difftide.diff.records import LineRecord, build_plain_records, build_records
from difftide.diff.text import normalize_texts
from difftide.highlight.assign import assign_tokens
from difftide.highlight.highlighter import Highlighter, create_highlighter
from difftide.highlight.languages import resolve_lang
from difftide.highlight.themes import EDITOR_BACKGROUND, EDITOR_FOREGROUND, build_theme_colors
from difftide.model import TokenizedCode
from difftide.options import TokenizeOptions
from difftide.projection import project_records
from difftide.runtime_logging import get_runtime_logger

ADDED_EOF_NEWLINE = "(added newline at end of file)"
REMOVED_EOF_NEWLINE = "(removed newline at end of file)"


async def tokenize(options: TokenizeOptions, highlighter: Highlighter | None = None) -> TokenizedCode:
    """Prepare ``options.code`` for rendering.

    The only asynchronous step is creating a highlighter when none is passed.
    Pass a shared ``highlighter`` when calling in rapid succession, such as
    once per streamed chunk.
    """

    lang = resolve_lang(options.lang, options.file_path)
    if highlighter is None:
        highlighter = await create_highlighter(langs=[lang], themes=[options.theme])
    return build_tokenized_code(options, highlighter, lang=lang)


def build_tokenized_code(
    options: TokenizeOptions,
    highlighter: Highlighter,
    *,
    lang: str | None = None,
    line_diff: DiffFunc = diff_lines,
    word_diff: DiffFunc = diff_words,
) -> TokenizedCode:
    logger = get_runtime_logger().bind(component="pipeline")
    lang = lang or resolve_lang(options.lang, options.file_path)
    theme = highlighter.load_theme(options.theme)
    collapse = options.collapse_config()
    logger.debug("tokenize.start", chars=len(options.code), lang=lang)

    with logger.timed(
        "tokenize.completed",
        lang=lang,
        theme=theme.name,
        is_diff=options.is_diff,
        is_streaming=options.is_streaming,
    ) as summary:
        texts = normalize_texts(options.code, options.diff_with)
        max_cols = texts.max_columns

        alignment: Alignment | None = None
        if texts.before is not None:
            alignment = align(texts.before, texts.after, streaming=options.is_streaming, line_diff=line_diff)
            logger.debug(
                "tokenize.aligned",
                hunks=len(alignment.hunks),
                preview_lines=len(alignment.preview_lines),
            )
            sequence = build_records(alignment.hunks, word_diff=word_diff)
        else:
            sequence = build_plain_records(texts.after.line_count)

        if options.is_streaming:
            apply_streaming_overlay(sequence, alignment)

        records = sequence.records
        if collapse is not None:
            records = collapse_unchanged(records, collapse.padding)
            logger.debug("tokenize.collapsed", before=len(sequence.records), after=len(records))

        # A partial stream has no real end of file to annotate.
        if texts.eof_newline_changed and not options.is_streaming:
            added = texts.after.had_trailing_newline
            special_text = ADDED_EOF_NEWLINE if added else REMOVED_EOF_NEWLINE
            records.append(LineRecord(kind="added" if added else "removed", special_text=special_text))
            max_cols = max(max_cols, len(special_text) + 1)

        after_result = highlighter.code_to_tokens(texts.after.content, theme=theme, lang=lang)
        before_result = None
        if texts.before is not None:
            before_result = highlighter.code_to_tokens(texts.before.content, theme=theme, lang=lang)
        assign_tokens(records, after=after_result, before=before_result)

        foreground = theme.color(EDITOR_FOREGROUND) or after_result.fg
        background = theme.color(EDITOR_BACKGROUND) or after_result.bg
        items, current_index = project_records(records, collapse.separator if collapse is not None else None)
        summary["items"] = len(items)

    return TokenizedCode(
        items=items,
        colors=build_theme_colors(theme, foreground, background),
        line_digits=texts.line_digits,
        max_cols=max_cols,
        is_diff=options.is_diff,
        is_streaming=options.is_streaming,
        current_line_index=current_index,
    )
