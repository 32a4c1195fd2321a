"""Pydantic models for sections and configuration."""
