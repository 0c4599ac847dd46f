"""Conditional visibility rule engine.

Single shared implementation used by both the authoring path (rule validation
before a form is stored) and the rendering path (visible question filtering
after every answer change). Every function here is pure and total: malformed
input yields a deterministic ``False`` rather than an exception.

No I/O, storage or configuration imports are allowed in this module.
"""

from __future__ import annotations

import json
from typing import Any, Iterable, Mapping

OPERATOR_EQUALS = "equals"
OPERATOR_NOT_EQUALS = "notEquals"
OPERATOR_CONTAINS = "contains"
OPERATORS = (OPERATOR_EQUALS, OPERATOR_NOT_EQUALS, OPERATOR_CONTAINS)

LOGIC_AND = "AND"
LOGIC_OR = "OR"
LOGICS = (LOGIC_AND, LOGIC_OR)

_MISSING = object()


def validate_condition(condition: Any) -> bool:
    """Return True if ``condition`` is a well-formed Condition record.

    - Must be a mapping with a non-empty string ``questionKey``.
    - ``operator`` must be one of equals / notEquals / contains.
    - ``value`` must be present and not None; "", False, 0 and [] are fine.
    """
    if not isinstance(condition, Mapping):
        return False
    question_key = condition.get("questionKey")
    if not isinstance(question_key, str) or not question_key:
        return False
    operator = condition.get("operator")
    if not isinstance(operator, str) or operator not in OPERATORS:
        return False
    return condition.get("value") is not None


def validate_conditional_rules(rules: Any) -> bool:
    """Return True if ``rules`` may be stored on a question.

    Absent rules are valid. A present rule needs logic AND/OR and a non-empty
    list of valid conditions; an empty list is rejected so that "no rules"
    stays distinct from "rules with nothing in them".
    """
    if rules is None:
        return True
    if not isinstance(rules, Mapping):
        return False
    logic = rules.get("logic")
    if not isinstance(logic, str) or logic not in LOGICS:
        return False
    conditions = rules.get("conditions")
    if not isinstance(conditions, (list, tuple)) or not conditions:
        return False
    return all(validate_condition(c) for c in conditions)


def _strict_equal(left: Any, right: Any) -> bool:
    # bool is an int subclass; never let True match 1 or 1.0.
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left is right
    numeric = (int, float)
    if isinstance(left, numeric) and isinstance(right, numeric):
        return left == right
    if isinstance(left, str) or isinstance(right, str):
        return isinstance(left, str) and isinstance(right, str) and left == right
    if isinstance(left, (list, tuple)) and isinstance(right, (list, tuple)):
        return len(left) == len(right) and all(_strict_equal(a, b) for a, b in zip(left, right))
    if isinstance(left, Mapping) and isinstance(right, Mapping):
        if set(left.keys()) != set(right.keys()):
            return False
        return all(_strict_equal(left[k], right[k]) for k in left)
    if left is None or right is None:
        return left is None and right is None
    return False


def _as_text(value: Any) -> str:
    """Stringify a condition value the way a JSON client would."""
    if isinstance(value, str):
        return value
    if isinstance(value, bool) or value is None:
        return json.dumps(value)
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (list, tuple)):
        return ",".join("" if v is None else _as_text(v) for v in value)
    if isinstance(value, Mapping):
        return json.dumps(dict(value), separators=(",", ":"))
    return str(value)


def _is_unanswered(answer: Any) -> bool:
    return answer is _MISSING or answer is None or (isinstance(answer, str) and answer == "")


def evaluate_condition(condition: Any, answers_so_far: Mapping[str, Any]) -> bool:
    """Evaluate one condition against the collected answers.

    An unanswered referenced question never satisfies a condition, whatever
    the operator and target value.
    """
    if not isinstance(condition, Mapping):
        return False
    question_key = condition.get("questionKey")
    if not isinstance(question_key, str):
        return False
    answer = answers_so_far.get(question_key, _MISSING)
    if _is_unanswered(answer):
        return False

    operator = condition.get("operator")
    value = condition.get("value")
    if operator == OPERATOR_EQUALS:
        return _strict_equal(answer, value)
    if operator == OPERATOR_NOT_EQUALS:
        return not _strict_equal(answer, value)
    if operator == OPERATOR_CONTAINS:
        if isinstance(answer, (list, tuple)):
            return any(_strict_equal(item, value) for item in answer)
        if isinstance(answer, str):
            return _as_text(value).lower() in answer.lower()
        return False
    return False


def should_show_question(rules: Any, answers_so_far: Mapping[str, Any] | None) -> bool:
    """Decide whether a question with ``rules`` is visible.

    - No rules, or a rule without conditions: visible.
    - Malformed rules (not a mapping, conditions not a list): hidden.
    - AND requires every condition, OR at least one; any other logic: hidden.
    """
    if rules is None:
        return True
    if not isinstance(rules, Mapping):
        return False
    conditions = rules.get("conditions")
    if conditions is None:
        return True
    if not isinstance(conditions, (list, tuple)):
        return False
    if not conditions:
        return True

    answers = answers_so_far if isinstance(answers_so_far, Mapping) else {}
    results = [evaluate_condition(c, answers) for c in conditions]

    logic = rules.get("logic")
    if logic == LOGIC_AND:
        return all(results)
    if logic == LOGIC_OR:
        return any(results)
    return False


def _rules_of(question: Any) -> Any:
    if isinstance(question, Mapping):
        return question.get("conditionalRules")
    return getattr(question, "conditional_rules", None)


def _key_of(question: Any) -> Any:
    if isinstance(question, Mapping):
        return question.get("questionKey")
    return getattr(question, "question_key", None)


def get_visible_questions(questions: Iterable[Any], answers: Mapping[str, Any] | None) -> list:
    """Return the questions currently visible, in their original order.

    Accepts Question models or plain mappings carrying ``conditionalRules``.
    Safe to call after every answer change; the result depends only on the
    two inputs.
    """
    return [q for q in (questions or []) if should_show_question(_rules_of(q), answers)]


def hidden_question_keys(questions: Iterable[Any], answers: Mapping[str, Any] | None) -> list[str]:
    """Return keys of questions hidden by their rules, in original order."""
    return [
        str(_key_of(q))
        for q in (questions or [])
        if not should_show_question(_rules_of(q), answers)
    ]


def referenced_question_keys(rules: Any) -> list[str]:
    """Return the distinct question keys a rule depends on, first-seen order."""
    if not isinstance(rules, Mapping):
        return []
    conditions = rules.get("conditions")
    if not isinstance(conditions, (list, tuple)):
        return []
    seen: list[str] = []
    for condition in conditions:
        if isinstance(condition, Mapping):
            key = condition.get("questionKey")
            if isinstance(key, str) and key and key not in seen:
                seen.append(key)
    return seen


__all__ = [
    "OPERATORS",
    "LOGICS",
    "validate_condition",
    "validate_conditional_rules",
    "evaluate_condition",
    "should_show_question",
    "get_visible_questions",
    "hidden_question_keys",
    "referenced_question_keys",
]
