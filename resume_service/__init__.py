"""
Resume Service - HTTP front end for one-page resume optimization.

Wraps the resume pipeline (Gemini call, HTML extraction, Playwright
rendering) in a FastAPI application with upload handling and health checks.
"""
