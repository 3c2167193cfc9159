"""
Setup script for the resume optimizer.

Allows development installation with `pip install -e .`
After installing, run `playwright install chromium` once.
"""

from setuptools import setup, find_packages

setup(
    name="resume-optimizer",
    version="1.0.0",
    packages=find_packages(include=["src", "src.*", "resume_service", "resume_service.*"]),
    py_modules=["version"],
    python_requires=">=3.11",
    install_requires=[
        "fastapi>=0.110",
        "uvicorn[standard]>=0.27",
        "python-multipart>=0.0.9",
        "pydantic>=2.5",
        "pydantic-settings>=2.1",
        "python-dotenv>=1.0",
        "playwright>=1.40",
        "google-genai>=1.0",
        "tenacity>=8.2",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
            "pytest-asyncio>=0.23",
            "pytest-mock>=3.12",
            "httpx>=0.25",
        ],
    },
)
