"""
Chat Analytics Backend Package.

Attribution-aware analytics engine for chat interactions: classifies each chat's
acquisition source, aggregates funnel counters in one pass and derives the
metrics summary the dashboard renders.

Subpackages:
    - api: FastAPI route handlers
    - core: Configuration and dependencies
    - models: Pydantic schemas and enums
    - services: Business logic services
    - jobs: Report generation
"""

__version__ = "1.0.0"
