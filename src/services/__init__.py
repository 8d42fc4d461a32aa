"""
Services - reference data used to enrich conversations
"""

from src.services.audit_data import AuditDatasets, load_audit_datasets

__all__ = ["AuditDatasets", "load_audit_datasets"]
