"""
Chat Analytics Backend Test Suite.

Test modules:
- test_attribution.py: source resolution, referrer domains, click ids, display mapping
- test_aggregation.py: single-pass counters and traffic split
- test_insights.py: rates, rankings and the full metrics summary
- test_status_selection.py: funnel status helpers and record filters
- test_ingestion.py: payload validation and file loading
- test_jobs.py: markdown analysis report
- test_api.py: HTTP endpoints through the ASGI app
"""
