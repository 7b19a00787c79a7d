"""Cascading filter options.

Each facet lists the values left in the scope-filtered table after applying
the caller's selections for the facets before it in ``FACETS``; its own
selection never narrows its own list. ``gift`` and ``bogo`` share the list
base of ``mgh4``; ``employee`` is narrowed by location facets only, through
``site_name``.
"""

from __future__ import annotations

from typing import Dict, List

import pandas as pd

from core.data import unique_values
from core.filters import FACET_BY_NAME, FACETS, FilterSpec, apply_facets, facets_before

_OPTION_BASE = {
    "gift": "mgh4",
    "bogo": "mgh4",
    "employee": "material_type",
}


def compute_filter_options(base_df: pd.DataFrame, spec: FilterSpec) -> Dict[str, List[str]]:
    options: Dict[str, List[str]] = {}
    for facet in FACETS:
        narrowed_by = facets_before(_OPTION_BASE.get(facet.name, facet.name))
        level = apply_facets(base_df, spec, narrowed_by)
        options[facet.name] = unique_values(level[facet.column]) if not level.empty else []
    return options


def is_valid_selection(options: Dict[str, List[str]], spec: FilterSpec) -> Dict[str, bool]:
    """Whether each constrained facet's value is still offered."""
    return {
        name: value in options.get(name, [])
        for name, value in spec.constraints().items()
        if name in FACET_BY_NAME
    }
