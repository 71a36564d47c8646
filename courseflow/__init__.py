"""
courseflow - Paginated course modules with knowledge checks and exams.

Subpackages:
- schemas: Pydantic models for sections, exams, catalog and progress
- classroom: Runtime components (loader, progress store, navigator, scoring, engine)
- viewer: HTML rendering helpers for the Streamlit front end
"""

__version__ = "0.1.0"
