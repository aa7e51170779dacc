from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence

from macrolens.services.completion_providers import format_procedure_signature
from macrolens.services.project_model import VbaProcedure
from macrolens.services.vba_language import BuiltinSignature, ParameterInfo, builtin_signature


@dataclass(frozen=True, slots=True)
class ParameterHint:
    function_name: str
    signature: str
    parameters: tuple[ParameterInfo, ...]
    active_parameter: int
    return_type: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "function_name": self.function_name,
            "signature": self.signature,
            "parameters": [
                {
                    "name": p.name,
                    "type": p.type,
                    "is_optional": p.is_optional,
                    "description": p.description,
                }
                for p in self.parameters
            ],
            "active_parameter": self.active_parameter,
            "return_type": self.return_type,
        }


def _is_identifier_char(char: str) -> bool:
    return char == "_" or (char.isascii() and char.isalnum())


def format_builtin_signature(sig: BuiltinSignature) -> str:
    parts: list[str] = []
    for param in sig.params:
        text = param.name
        if param.type:
            text += f" As {param.type}"
        if param.is_optional:
            text = f"[{text}]"
        parts.append(text)
    return_type = f" As {sig.return_type}" if sig.return_type else ""
    return f"{sig.name}({', '.join(parts)}){return_type}"


def _find_open_paren(source: str, cursor_offset: int) -> int:
    depth = 0
    for index in range(cursor_offset - 1, -1, -1):
        char = source[index]
        if char == ")":
            depth += 1
        elif char == "(":
            if depth == 0:
                return index
            depth -= 1
    return -1


def _function_name_before(source: str, paren_index: int) -> str:
    end = paren_index
    while end > 0 and source[end - 1].isspace():
        end -= 1
    start = end
    while start > 0 and _is_identifier_char(source[start - 1]):
        start -= 1
    return source[start:end]


def _count_active_parameter(source: str, paren_index: int, cursor_offset: int) -> int:
    active = 0
    depth = 0
    in_string = False
    for index in range(paren_index + 1, cursor_offset):
        char = source[index]
        if char == '"':
            in_string = not in_string
        elif in_string:
            continue
        elif char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
        elif char == "," and depth == 0:
            active += 1
    return active


def detect_parameter_context(
    source: str,
    cursor_offset: int,
    procedures: Sequence[VbaProcedure],
) -> ParameterHint | None:
    """Find the call the cursor sits in and which argument it is on.

    Builtins are looked up first, then the known procedures; both lookups
    ignore case and report the canonical name.
    """
    text = str(source or "")
    offset = max(0, min(len(text), int(cursor_offset)))
    paren_index = _find_open_paren(text, offset)
    if paren_index == -1:
        return None

    name = _function_name_before(text, paren_index)
    if not name:
        return None

    active = _count_active_parameter(text, paren_index, offset)

    builtin = builtin_signature(name)
    if builtin is not None:
        return ParameterHint(
            function_name=builtin.name,
            signature=format_builtin_signature(builtin),
            parameters=builtin.params,
            active_parameter=active,
            return_type=builtin.return_type,
        )

    wanted = name.lower()
    for proc in procedures:
        if proc.name.lower() != wanted:
            continue
        return ParameterHint(
            function_name=proc.name,
            signature=format_procedure_signature(proc),
            parameters=tuple(
                ParameterInfo(name=p.name, type=p.type_name, is_optional=p.is_optional)
                for p in proc.parameters
            ),
            active_parameter=active,
            return_type=proc.return_type,
        )
    return None
