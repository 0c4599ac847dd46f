"""QuestionType enumeration for Airtable-derived form fields.

Provides a simple constants container instead of an Enum so that raw type
tags from Airtable pass through unchanged.
"""

from __future__ import annotations


class QuestionType:
    SINGLE_LINE_TEXT = "singleLineText"
    MULTILINE_TEXT = "multilineText"
    SINGLE_SELECT = "singleSelect"
    MULTIPLE_SELECT = "multipleSelect"
    MULTIPLE_ATTACHMENTS = "multipleAttachments"
    EMAIL = "email"
    URL = "url"
    NUMBER = "number"
    CHECKBOX = "checkbox"


# Types whose answers are forwarded to Airtable on submit
SUBMITTABLE_TYPES = frozenset(
    {
        QuestionType.SINGLE_LINE_TEXT,
        QuestionType.MULTILINE_TEXT,
        QuestionType.SINGLE_SELECT,
        QuestionType.MULTIPLE_SELECT,
        QuestionType.EMAIL,
        QuestionType.URL,
        QuestionType.NUMBER,
        QuestionType.CHECKBOX,
    }
)

# Airtable field types a form cannot render
UNSUPPORTED_TYPES = frozenset(
    {
        "singleCollaborator",
        "multipleCollaborators",
        QuestionType.MULTIPLE_ATTACHMENTS,
        "aiText",
    }
)


__all__ = ["QuestionType", "SUBMITTABLE_TYPES", "UNSUPPORTED_TYPES"]
