"""ORM table definitions for stored forms and their responses."""

from __future__ import annotations

from sqlalchemy.orm import declarative_base
from sqlalchemy import Boolean, Column, DateTime, Index, Integer, String, Text


Base = declarative_base()


class FormRecord(Base):  # type: ignore[valid-type]
    __tablename__ = "form"

    form_id = Column(String, primary_key=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False, default="")
    airtable_base_id = Column(String, nullable=False)
    airtable_table_id = Column(String, nullable=False)
    airtable_table_name = Column(String, nullable=False)
    # Ordered question list serialised as JSON text
    questions_json = Column(Text, nullable=False)
    is_published = Column(Boolean, nullable=False, default=True)
    response_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)


class FormResponseRecord(Base):  # type: ignore[valid-type]
    __tablename__ = "form_response"
    __table_args__ = (
        Index("ix_form_response_form_created", "form_id", "created_at"),
        Index("ix_form_response_record", "airtable_record_id"),
    )

    response_id = Column(String, primary_key=True)
    form_id = Column(String, nullable=False)
    airtable_record_id = Column(String, nullable=False)
    answers_json = Column(Text, nullable=False)
    status = Column(String, nullable=False, default="submitted")  # submitted | synced | error
    deleted_in_airtable = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)


__all__ = ["Base", "FormRecord", "FormResponseRecord"]
