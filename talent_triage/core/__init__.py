"""
Core business logic modules for Talent-Triage.

Submodules:
- matching: Resume/job text normalization, skill extraction and scoring
- automation: Threshold rules for automatic shortlisting and rejection
- batch: Bulk status transitions split by application variant
- application_ref: Variant-tagged application identities
- exceptions: Error hierarchy shared by all layers
"""
