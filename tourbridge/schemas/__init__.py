"""Pydantic schemas for Tourbridge."""
