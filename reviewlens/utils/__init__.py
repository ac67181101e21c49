"""
Utility modules for ReviewLens.

Cross-cutting concerns:
- Storage: export pipeline results as CSV/JSON reports
"""
