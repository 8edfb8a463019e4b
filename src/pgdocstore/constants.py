"""
Shared constants for filters, ordering, projection and physical layout.
"""


class SortDirection:
    ASC = "ASC"
    DESC = "DESC"


SORT_ASC = SortDirection.ASC
SORT_DESC = SortDirection.DESC

SORT_DIRECTION_MAP = {
    "asc": SortDirection.ASC,
    "desc": SortDirection.DESC,
}

# Physical columns of every collection table
ID_COLUMN = "id"
DOC_COLUMN = "doc"

# Reserved sub-object whose keys are promoted to physical columns
METADATA_KEY = "metadata"
METADATA_PREFIX = METADATA_KEY + "."

# Reserved projection column aliases
PARTIAL_SELECT_DOC_ID = "__partial_sel_doc_id__"
PARTIAL_SELECT_MERGE = "__partial_sel_merge__"
PARTIAL_SELECT_FIELD = "__partial_sel_field__"

DEFAULT_SCHEMA = "public"
