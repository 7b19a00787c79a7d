"""Core (UI-agnostic) sales dashboard logic.

This package contains:
- data loading (CSV -> pandas) with a checksum-keyed parse cache
- filter normalization, scope and facet predicates
- target deduplication shared by every target figure
- compute functions for KPIs, trends, rankings, cascading filter options,
  previous-period comparison and run-rate projection (JSON-serializable payloads)
"""
