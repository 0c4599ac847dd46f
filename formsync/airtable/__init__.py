"""Thin Airtable REST collaborator used by submission and schema routes."""

from formsync.airtable.client import AirtableClient, AirtableError

__all__ = ["AirtableClient", "AirtableError"]
