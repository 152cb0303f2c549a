"""
Filter language for document content.

A query is a list of parts alternating between conditions and the logical
words ``and``/``or``::

    ["status equals \"active\"", "or", "priority lessthan 3"]

Each condition is ``path operator value`` or, to test the content itself,
``operator value``. Paths are dot separated; numeric segments index arrays
(``tags.0``). Values are double-quoted strings, numbers, ``true``/``false``
or ``null``; anything else is read as a bare string. String operators accept
an ``-insensitive`` suffix. Conditions are combined strictly left to right,
so ``a and b or c`` means ``(a and b) or c``.
"""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Iterable

from docshare.domain.exceptions import BadRequestError

LOGIC_AND = "and"
LOGIC_OR = "or"

INSENSITIVE_SUFFIX = "-insensitive"

NUMERIC_OPERATORS = frozenset(
    {"greaterthan", "lessthan", "greaterthanorequals", "lessthanorequals"}
)
STRING_OPERATORS = frozenset({"contains", "startswith", "endswith"})
EQUALITY_OPERATORS = frozenset({"equals", "notequals"})
OPERATORS = NUMERIC_OPERATORS | STRING_OPERATORS | EQUALITY_OPERATORS

# operators allowed on plain text and on primitive content at the root
TEXT_OPERATORS = STRING_OPERATORS | EQUALITY_OPERATORS

_TRUE_WORDS = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_WORDS = frozenset({"0", "f", "F", "FALSE", "false", "False"})


class ContentQueryError(ValueError):
    """A condition cannot be applied to one particular document."""


@dataclass(frozen=True)
class QueryCondition:
    path: str  # empty for the content root
    operator: str  # lower-case, without the insensitive suffix
    value: Any
    kind: str  # "string", "number", "bool" or "null"
    insensitive: bool = False
    original: str = ""


@dataclass(frozen=True)
class ContentQuery:
    conditions: list[QueryCondition]
    # logic[i] joins conditions[i] and conditions[i + 1]
    logic: list[str] = field(default_factory=list)

    def matches(self, content: Any) -> bool:
        """Evaluate against one document's content.

        Raises:
            ContentQueryError: If a condition does not apply to this content,
                e.g. a missing path or an operator the value type lacks.
        """
        result = evaluate_condition(content, self.conditions[0])
        for logic, cond in zip(self.logic, self.conditions[1:]):
            nxt = evaluate_condition(content, cond)
            result = (result and nxt) if logic == LOGIC_AND else (result or nxt)
        return result


def _kind(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    return "object"


def _parse_value(raw: str) -> tuple[Any, str]:
    raw = raw.strip()
    if len(raw) >= 2 and raw[0] == '"' and raw[-1] == '"':
        return raw[1:-1], "string"
    if raw == "null":
        return None, "null"
    # numbers before booleans: "0" and "1" are numbers
    try:
        return float(raw), "number"
    except ValueError:
        pass
    if raw in _TRUE_WORDS:
        return True, "bool"
    if raw in _FALSE_WORDS:
        return False, "bool"
    return raw, "string"


def _is_operator(word: str) -> bool:
    word = word.lower()
    if word in OPERATORS:
        return True
    return word.endswith(INSENSITIVE_SUFFIX) and word[: -len(INSENSITIVE_SUFFIX)] in TEXT_OPERATORS


def parse_condition(text: str) -> QueryCondition:
    """Parse one ``[path] operator value`` condition.

    Raises:
        BadRequestError: On a missing operator or value, or an unknown operator.
    """
    words = text.split()
    if len(words) < 2:
        raise BadRequestError("condition must have at least an operator and a value")

    if _is_operator(words[0]):
        path = ""
        operator, raw_value = text.split(None, 1)
    elif len(words) >= 3:
        path, operator, raw_value = text.split(None, 2)
    elif _is_operator(words[1]):
        raise BadRequestError("condition must have at least an operator and a value")
    else:
        raise BadRequestError("invalid condition format")

    operator = operator.lower()
    insensitive = False
    if operator.endswith(INSENSITIVE_SUFFIX):
        base = operator[: -len(INSENSITIVE_SUFFIX)]
        if base not in TEXT_OPERATORS:
            raise BadRequestError(f"invalid base operator for insensitive matching '{base}'")
        operator, insensitive = base, True
    elif operator not in OPERATORS:
        raise BadRequestError(f"invalid operator '{operator}'")

    value, kind = _parse_value(raw_value)
    return QueryCondition(
        path=path,
        operator=operator,
        value=value,
        kind=kind,
        insensitive=insensitive,
        original=text,
    )


def parse_content_query(parts: Iterable[str] | None) -> ContentQuery | None:
    """Parse the repeated ``content_query`` values of a request.

    Returns None when no parts are given.

    Raises:
        BadRequestError: On any syntax error, prefixed with
            ``Invalid content_query``.
    """
    parts = list(parts or [])
    if not parts:
        return None

    conditions: list[QueryCondition] = []
    logic: list[str] = []
    expecting_condition = True
    for i, part in enumerate(parts):
        part = part.strip()
        if not part:
            raise BadRequestError(f"Invalid content_query: query part at index {i} is empty")
        if expecting_condition:
            try:
                conditions.append(parse_condition(part))
            except BadRequestError as exc:
                raise BadRequestError(
                    f"Invalid content_query: invalid condition at index {i} ('{part}'): {exc.message}"
                ) from exc
        else:
            word = part.lower()
            if word not in (LOGIC_AND, LOGIC_OR):
                raise BadRequestError(
                    f"Invalid content_query: invalid logical operator at index {i}: "
                    f"'{part}', expected 'and' or 'or'"
                )
            logic.append(word)
        expecting_condition = not expecting_condition

    if expecting_condition:
        raise BadRequestError(
            "Invalid content_query: query must end with a condition, not a logical operator"
        )
    return ContentQuery(conditions=conditions, logic=logic)


_MISSING = object()


def _resolve(content: Any, path: str) -> Any:
    node = content
    for segment in path.split("."):
        if isinstance(node, dict):
            node = node.get(segment, _MISSING)
        elif isinstance(node, list) and segment.isdigit() and int(segment) < len(node):
            node = node[int(segment)]
        else:
            return _MISSING
        if node is _MISSING:
            return _MISSING
    return node


def _compare_text(target: str, cond: QueryCondition) -> bool:
    wanted = cond.value
    if cond.insensitive:
        target, wanted = target.lower(), wanted.lower()
    op = cond.operator
    if op == "equals":
        return target == wanted
    if op == "notequals":
        return target != wanted
    if op == "contains":
        return wanted in target
    if op == "startswith":
        return target.startswith(wanted)
    return target.endswith(wanted)


def _array_contains(items: list[Any], cond: QueryCondition) -> bool:
    for item in items:
        kind = _kind(item)
        if kind != cond.kind:
            continue
        if kind == "null":
            return True
        if kind == "string" and cond.insensitive:
            if item.lower() == cond.value.lower():
                return True
        elif item == cond.value:
            return True
    return False


def _plain_text(content: Any) -> str | None:
    # text that is not itself JSON is matched as a whole
    if not isinstance(content, str):
        return None
    try:
        json.loads(content)
    except ValueError:
        return content
    return None


def evaluate_condition(content: Any, cond: QueryCondition) -> bool:
    """Apply one condition to a document's content.

    Raises:
        ContentQueryError: When the condition cannot be applied.
    """
    text = _plain_text(content)
    if text is not None:
        if cond.operator not in TEXT_OPERATORS:
            raise ContentQueryError(
                f"content is plain text, and operator '{cond.operator}' is not supported"
            )
        if cond.kind != "string":
            raise ContentQueryError(
                f"value '{cond.value}' cannot be compared with plain text content"
            )
        return _compare_text(text, cond)

    if isinstance(content, str):
        content = json.loads(content)

    if cond.path:
        target = _resolve(content, cond.path)
        if target is _MISSING:
            raise ContentQueryError(f"path '{cond.path}' does not exist in document content")
    else:
        target = content

    op = cond.operator
    target_kind = _kind(target)

    if not cond.path and target_kind in ("string", "number", "bool") and op not in TEXT_OPERATORS:
        raise ContentQueryError(f"content is plain text, and operator '{op}' is not supported")

    if target_kind == "array" and op == "contains":
        return _array_contains(target, cond)

    if target_kind == "null" or cond.kind == "null":
        if target_kind == "null" and cond.kind == "null":
            if op in EQUALITY_OPERATORS:
                return op == "equals"
            raise ContentQueryError(f"operator '{op}' invalid for null comparison")
        if op in EQUALITY_OPERATORS:
            return op == "notequals"
        if op == "contains":
            return False
        raise ContentQueryError(
            f"operator '{op}' invalid for comparing null with non-null value"
        )

    if target_kind == "string":
        if op not in TEXT_OPERATORS:
            raise ContentQueryError(
                f"type mismatch: cannot apply numeric operator '{op}' to string value"
            )
        if cond.kind != "string":
            if op == "notequals":
                return True
            raise ContentQueryError(
                f"type mismatch: cannot compare string with {cond.kind} using operator '{op}'"
            )
        return _compare_text(target, cond)

    if target_kind == "number":
        if op not in NUMERIC_OPERATORS | EQUALITY_OPERATORS:
            raise ContentQueryError(
                f"type mismatch: cannot apply string operator '{op}' to numeric value"
            )
        if cond.kind != "number":
            if op == "notequals":
                return True
            raise ContentQueryError(
                f"type mismatch: value '{cond.value}' is not a valid number "
                f"for comparison with operator '{op}'"
            )
        if cond.insensitive:
            raise ContentQueryError(
                f"operator '{cond.original}' cannot be case-insensitive for numeric comparison"
            )
        wanted = cond.value
        return {
            "equals": target == wanted,
            "notequals": target != wanted,
            "greaterthan": target > wanted,
            "lessthan": target < wanted,
            "greaterthanorequals": target >= wanted,
            "lessthanorequals": target <= wanted,
        }[op]

    if target_kind == "bool":
        if op not in EQUALITY_OPERATORS:
            raise ContentQueryError(f"operator '{op}' is invalid for boolean comparison")
        if cond.kind != "bool":
            if op == "notequals":
                return True
            raise ContentQueryError(
                f"type mismatch: value '{cond.value}' is not a valid boolean "
                f"for comparison with operator '{op}'"
            )
        if cond.insensitive:
            raise ContentQueryError(
                f"operator '{cond.original}' cannot be case-insensitive for boolean comparison"
            )
        return (target == cond.value) == (op == "equals")

    if target_kind == "array":
        if op in EQUALITY_OPERATORS:
            raise ContentQueryError(f"operator '{op}' cannot directly compare arrays/objects")
        raise ContentQueryError(f"operator '{op}' is invalid for array comparison")

    # object
    if not cond.path and op in EQUALITY_OPERATORS:
        return False
    raise ContentQueryError(f"operator '{op}' cannot directly compare JSON objects")
