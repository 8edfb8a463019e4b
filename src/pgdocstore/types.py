"""Type aliases for pgdocstore package.

This module provides reusable type definitions to ensure consistency
across the codebase and improve code readability.
"""

from typing import Any, Dict, Mapping, Sequence, Tuple

# Stored document, a JSON object
Doc = Mapping[str, Any]

# Document identifiers
DocId = str
DocIds = Sequence[str]

# Bound statement parameters, keyed by placeholder name
Params = Dict[str, Any]

# Pair yielded by find_docs / find_partial_docs
DocWithId = Tuple[str, Dict[str, Any]]
