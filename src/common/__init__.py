"""Shared error taxonomy and logging for the resume optimizer."""
