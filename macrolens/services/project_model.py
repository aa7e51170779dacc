"""Immutable project model handed over by the host's structural parser."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Literal, Mapping

ModuleType = Literal["standard", "class", "form", "document"]
ProcedureKind = Literal["sub", "function", "propertyGet", "propertyLet", "propertySet"]
PassingMode = Literal["byVal", "byRef"]

_MODULE_TYPES = ("standard", "class", "form", "document")
_PROCEDURE_KINDS = ("sub", "function", "propertyGet", "propertyLet", "propertySet")


@dataclass(frozen=True, slots=True)
class VbaParameter:
    name: str
    type_name: str | None = None
    is_optional: bool = False
    passing_mode: PassingMode = "byRef"
    default_value: str | None = None
    is_param_array: bool = False


@dataclass(frozen=True, slots=True)
class VbaProcedure:
    name: str
    kind: ProcedureKind = "sub"
    visibility: str = "public"
    parameters: tuple[VbaParameter, ...] = ()
    return_type: str | None = None


@dataclass(frozen=True, slots=True)
class VbaModule:
    name: str
    module_type: ModuleType = "standard"
    source_code: str = ""
    procedures: tuple[VbaProcedure, ...] = ()


@dataclass(frozen=True, slots=True)
class VbaProgram:
    project_name: str = ""
    modules: tuple[VbaModule, ...] = field(default_factory=tuple)


def _type_name(raw: Any) -> str | None:
    if raw is None:
        return None
    if isinstance(raw, Mapping):
        user_defined = raw.get("userDefined") or raw.get("user_defined")
        return str(user_defined) if user_defined else None
    text = str(raw).strip()
    return text or None


def parameter_from_dict(raw: Mapping[str, Any]) -> VbaParameter:
    passing = str(raw.get("passingMode") or raw.get("passing_mode") or "byRef")
    default_value = raw.get("defaultValue", raw.get("default_value"))
    return VbaParameter(
        name=str(raw.get("name") or ""),
        type_name=_type_name(raw.get("type", raw.get("type_name"))),
        is_optional=bool(raw.get("isOptional", raw.get("is_optional", False))),
        passing_mode="byVal" if passing == "byVal" else "byRef",
        default_value=None if default_value is None else str(default_value),
        is_param_array=bool(raw.get("isParamArray", raw.get("is_param_array", False))),
    )


def procedure_from_dict(raw: Mapping[str, Any]) -> VbaProcedure:
    kind = str(raw.get("kind") or raw.get("type") or "sub")
    if kind not in _PROCEDURE_KINDS:
        kind = "sub"
    params = raw.get("parameters") or ()
    return VbaProcedure(
        name=str(raw.get("name") or ""),
        kind=kind,  # type: ignore[arg-type]
        visibility=str(raw.get("visibility") or "public"),
        parameters=tuple(parameter_from_dict(p) for p in params if isinstance(p, Mapping)),
        return_type=_type_name(raw.get("returnType", raw.get("return_type"))),
    )


def module_from_dict(raw: Mapping[str, Any]) -> VbaModule:
    module_type = str(raw.get("type") or raw.get("module_type") or "standard")
    if module_type not in _MODULE_TYPES:
        module_type = "standard"
    procedures = raw.get("procedures") or ()
    return VbaModule(
        name=str(raw.get("name") or ""),
        module_type=module_type,  # type: ignore[arg-type]
        source_code=str(raw.get("sourceCode", raw.get("source_code", "")) or ""),
        procedures=tuple(procedure_from_dict(p) for p in procedures if isinstance(p, Mapping)),
    )


def program_from_dict(raw: Mapping[str, Any]) -> VbaProgram:
    modules = raw.get("modules") or ()
    return VbaProgram(
        project_name=str(raw.get("projectName", raw.get("project_name", "")) or ""),
        modules=tuple(module_from_dict(m) for m in modules if isinstance(m, Mapping)),
    )


def find_module(modules: Iterable[VbaModule], name: str | None) -> VbaModule | None:
    if name is None:
        return None
    for module in modules:
        if module.name == name:
            return module
    return None


@dataclass(frozen=True, slots=True)
class SourceEntry:
    """Edited buffer of one module plus the caret offset to restore."""

    source: str
    cursor_offset: int = 0
