"""
Pydantic schemas for API v1.
"""
