from __future__ import annotations

from macrolens.services.language_provider import CompletionContext, CompletionTrigger


def _is_identifier_char(char: str) -> bool:
    return char == "_" or ("a" <= char <= "z") or ("A" <= char <= "Z") or ("0" <= char <= "9")


def _line_start(source: str, offset: int) -> int:
    return source.rfind("\n", 0, offset) + 1


def is_inside_string_or_comment(line_prefix: str) -> bool:
    """Return True when the end of ``line_prefix`` sits in a string or comment."""
    in_string = False
    index = 0
    length = len(line_prefix)
    while index < length:
        char = line_prefix[index]
        if char == '"':
            if in_string and index + 1 < length and line_prefix[index + 1] == '"':
                index += 2
                continue
            in_string = not in_string
        elif char == "'" and not in_string:
            return True
        elif not in_string and char in "Rr" and _starts_rem(line_prefix, index):
            return True
        index += 1
    return in_string


def _starts_rem(text: str, index: int) -> bool:
    if text[index:index + 3].lower() != "rem":
        return False
    if index > 0 and not (text[index - 1].isspace() or text[index - 1] == ":"):
        return False
    after = index + 3
    # "Rem" at the very end of the prefix is still being typed as a word.
    return after < len(text) and text[after].isspace()


def extract_prefix(source: str, offset: int) -> tuple[str, int]:
    start = offset
    while start > 0 and _is_identifier_char(source[start - 1]):
        start -= 1
    return source[start:offset], start


def detect_dot_trigger(source: str, prefix_start: int) -> tuple[bool, str | None]:
    pos = prefix_start - 1
    while pos >= 0 and source[pos] in " \t":
        pos -= 1
    if pos < 0 or source[pos] != ".":
        return False, None
    end = pos
    while end > 0 and source[end - 1] in " \t":
        end -= 1
    start = end
    while start > 0 and _is_identifier_char(source[start - 1]):
        start -= 1
    object_name = source[start:end]
    return True, object_name or None


def detect_completion_context(
    source: str,
    cursor_offset: int,
    trigger: CompletionTrigger,
) -> CompletionContext | None:
    """Work out what is being completed at ``cursor_offset``.

    Returns ``None`` when completion should not open: at the start of the
    buffer while typing, inside a comment or string literal, or when typing
    has produced no identifier characters yet.
    """
    text = str(source or "")
    offset = max(0, min(len(text), int(cursor_offset)))
    if offset == 0 and trigger == "typing":
        return None

    line_start = _line_start(text, offset)
    if is_inside_string_or_comment(text[line_start:offset]):
        return None

    prefix, prefix_start = extract_prefix(text, offset)
    is_dot, object_name = detect_dot_trigger(text, prefix_start)
    effective: CompletionTrigger = "dot" if is_dot else trigger
    if effective == "typing" and not prefix:
        return None

    line = text.count("\n", 0, offset) + 1
    column = offset - line_start + 1
    return CompletionContext(
        trigger=effective,
        prefix=prefix,
        prefix_start_offset=prefix_start,
        line=line,
        column=column,
        object_name=object_name if is_dot else None,
    )
