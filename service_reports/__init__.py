"""
Service-billing record ingestion and coverage reports.
"""
