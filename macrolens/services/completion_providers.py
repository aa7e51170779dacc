from __future__ import annotations

import re
from typing import Iterable, Iterator, Sequence

from macrolens.services.language_provider import CompletionContext, CompletionItem
from macrolens.services.lexer import tokenize_line
from macrolens.services.project_model import VbaParameter, VbaProcedure
from macrolens.services.vba_language import (
    BUILTIN_DOCS,
    BUILTINS,
    CONSTANTS,
    KEYWORD_DOCS,
    KEYWORDS,
    SELF_REFERENCE_KEYWORD,
    TYPE_DOCS,
    TYPES,
)

_PROCEDURE_HEADER_RE = re.compile(
    r"^(?:(?:Public|Private|Friend|Global)\s+)?(?:Static\s+)?"
    r"(?:Sub|Function|Property\s+(?:Get|Let|Set))\s+[A-Za-z]\w*[$%&!#]?\s*\(",
    re.IGNORECASE,
)
_NON_DECLARATION_HEADER_RE = re.compile(
    r"^(?:(?:Public|Private|Friend|Global)\s+)?(?:Static\s+)?"
    r"(?:Sub|Function|Property|Type|Enum|Declare|Event|Implements)\b",
    re.IGNORECASE,
)
_DECLARATION_RE = re.compile(
    r"^(?:(?P<scope>Public|Private|Global|Friend)\s+)?"
    r"(?:(?P<keyword>Dim|ReDim\s+Preserve|ReDim|Const|Static)\s+)?(?P<body>.+)$",
    re.IGNORECASE,
)
_DECLARED_NAME_RE = re.compile(
    r"^(?:WithEvents\s+)?(?P<name>[A-Za-z]\w*)[$%&!#]?\s*(?:\([^)]*\))?\s*"
    r"(?:As\s+(?:New\s+)?(?P<type>[A-Za-z][\w.]*))?",
    re.IGNORECASE,
)
_FOR_EACH_RE = re.compile(r"^For\s+Each\s+(?P<name>[A-Za-z]\w*)\s+In\b", re.IGNORECASE)
_FOR_RE = re.compile(r"^For\s+(?P<name>[A-Za-z]\w*)[$%&!#]?\s*=", re.IGNORECASE)
_PARAMETER_MODIFIER_RE = re.compile(r"^(?:Optional|ByVal|ByRef|ParamArray)\s+", re.IGNORECASE)
_PARAMETER_RE = re.compile(
    r"^(?P<name>[A-Za-z]\w*)[$%&!#]?\s*(?:\(\s*\))?\s*(?:As\s+(?P<type>[A-Za-z][\w.]*))?",
    re.IGNORECASE,
)


def strip_code_line(line: str) -> str:
    """Return ``line`` without its comment and with string contents blanked."""
    parts: list[str] = []
    for token in tokenize_line(line):
        if token.type == "comment":
            break
        if token.type == "string":
            parts.append('""')
        else:
            parts.append(token.text)
    return "".join(parts)


def split_top_level(text: str, separator: str) -> list[str]:
    parts: list[str] = []
    depth = 0
    current: list[str] = []
    for char in text:
        if char == "(":
            depth += 1
        elif char == ")":
            depth = max(0, depth - 1)
        elif char == separator and depth == 0:
            parts.append("".join(current))
            current = []
            continue
        current.append(char)
    parts.append("".join(current))
    return parts


def _logical_statements(source: str) -> Iterator[str]:
    pending = ""
    for raw_line in source.split("\n"):
        code = strip_code_line(raw_line.rstrip("\r")).rstrip()
        if code.endswith(" _") or code == "_":
            pending += code[:-1] + " "
            continue
        line = pending + code
        pending = ""
        for statement in split_top_level(line, ":"):
            statement = statement.strip()
            if statement:
                yield statement
    if pending.strip():
        yield pending.strip()


def _parameter_list(statement: str) -> str:
    open_index = statement.find("(")
    depth = 0
    for index in range(open_index, len(statement)):
        char = statement[index]
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth == 0:
                return statement[open_index + 1:index]
    return statement[open_index + 1:]


def _parameter_items(statement: str) -> Iterator[CompletionItem]:
    for part in split_top_level(_parameter_list(statement), ","):
        text = part.strip()
        while True:
            stripped = _PARAMETER_MODIFIER_RE.sub("", text, count=1)
            if stripped == text:
                break
            text = stripped
        text = text.split("=", 1)[0].strip()
        match = _PARAMETER_RE.match(text)
        if match is None:
            continue
        type_name = match.group("type")
        yield CompletionItem(
            label=match.group("name"),
            kind="variable",
            detail="Parameter",
            documentation=f"As {type_name}" if type_name else None,
            insert_text=match.group("name"),
        )


def _declaration_items(statement: str) -> Iterator[CompletionItem]:
    match = _DECLARATION_RE.match(statement)
    if match is None or not (match.group("scope") or match.group("keyword")):
        return
    is_const = (match.group("keyword") or "").lower() == "const"
    for part in split_top_level(match.group("body"), ","):
        name_match = _DECLARED_NAME_RE.match(part.strip())
        if name_match is None:
            continue
        yield CompletionItem(
            label=name_match.group("name"),
            kind="constant" if is_const else "variable",
            detail=name_match.group("type") or "Variant",
            insert_text=name_match.group("name"),
        )


def _loop_item(statement: str) -> CompletionItem | None:
    match = _FOR_EACH_RE.match(statement) or _FOR_RE.match(statement)
    if match is None:
        return None
    return CompletionItem(
        label=match.group("name"),
        kind="variable",
        detail="Loop variable",
        insert_text=match.group("name"),
    )


def extract_variables(source: str) -> list[CompletionItem]:
    """Collect declared names, loop variables and parameters in source order."""
    items: list[CompletionItem] = []
    seen: set[str] = set()

    def _add(candidates: Iterable[CompletionItem]) -> None:
        for item in candidates:
            key = item.label.lower()
            if key in seen:
                continue
            seen.add(key)
            items.append(item)

    for statement in _logical_statements(str(source or "")):
        if _PROCEDURE_HEADER_RE.match(statement):
            _add(_parameter_items(statement))
            continue
        if _NON_DECLARATION_HEADER_RE.match(statement):
            continue
        loop_item = _loop_item(statement)
        if loop_item is not None:
            _add((loop_item,))
            continue
        _add(_declaration_items(statement))
    return items


def _format_parameter(param: VbaParameter) -> str:
    text = param.name
    if param.type_name:
        text += f" As {param.type_name}"
    if param.is_optional:
        text = f"[{text}]"
    return text


_PROCEDURE_PREFIXES = {
    "sub": "Sub",
    "function": "Function",
    "propertyGet": "Property Get",
    "propertyLet": "Property Let",
    "propertySet": "Property Set",
}


def format_procedure_signature(proc: VbaProcedure) -> str:
    prefix = _PROCEDURE_PREFIXES.get(proc.kind, "Sub")
    params = ", ".join(_format_parameter(p) for p in proc.parameters)
    return_type = f" As {proc.return_type}" if proc.return_type and proc.kind != "sub" else ""
    return f"{prefix} {proc.name}({params}){return_type}"


class VariableProvider:
    name = "variable"

    def provide(
        self,
        context: CompletionContext,
        source: str,
        procedures: Sequence[VbaProcedure],
    ) -> list[CompletionItem]:
        if context.trigger == "dot":
            return []
        return extract_variables(source)


class ProcedureProvider:
    name = "procedure"

    def provide(
        self,
        context: CompletionContext,
        source: str,
        procedures: Sequence[VbaProcedure],
    ) -> list[CompletionItem]:
        if context.trigger == "dot":
            object_name = (context.object_name or "").lower()
            if object_name != SELF_REFERENCE_KEYWORD.lower():
                return []
        items: list[CompletionItem] = []
        for proc in procedures:
            if not proc.name:
                continue
            is_property = proc.kind.startswith("property")
            items.append(
                CompletionItem(
                    label=proc.name,
                    kind="property" if is_property else "procedure",
                    detail=format_procedure_signature(proc),
                    documentation=f"{proc.visibility.capitalize()} {_PROCEDURE_PREFIXES.get(proc.kind, 'Sub')}",
                    insert_text=proc.name,
                )
            )
        return items


_KEYWORD_ITEMS: tuple[CompletionItem, ...] = tuple(
    CompletionItem(
        label=name,
        kind="keyword",
        detail="Keyword",
        documentation=KEYWORD_DOCS.get(name),
        insert_text=name,
    )
    for name in KEYWORDS
) + tuple(
    CompletionItem(
        label=name,
        kind="type",
        detail="Type",
        documentation=TYPE_DOCS.get(name),
        insert_text=name,
    )
    for name in TYPES
)

_BUILTIN_ITEMS: tuple[CompletionItem, ...] = tuple(
    CompletionItem(
        label=name,
        kind="builtin",
        detail=BUILTIN_DOCS.get(name, ("Function", None))[0],
        documentation=BUILTIN_DOCS.get(name, ("Function", None))[1],
        insert_text=name,
    )
    for name in BUILTINS
) + tuple(
    CompletionItem(label=name, kind="constant", detail=detail, documentation=doc, insert_text=name)
    for name, (detail, doc) in CONSTANTS.items()
)


class KeywordProvider:
    name = "keyword"

    def provide(
        self,
        context: CompletionContext,
        source: str,
        procedures: Sequence[VbaProcedure],
    ) -> list[CompletionItem]:
        if context.trigger == "dot":
            return []
        return list(_KEYWORD_ITEMS)


class BuiltinProvider:
    name = "builtin"

    def provide(
        self,
        context: CompletionContext,
        source: str,
        procedures: Sequence[VbaProcedure],
    ) -> list[CompletionItem]:
        if context.trigger == "dot":
            return []
        return list(_BUILTIN_ITEMS)
