"""Core constants: query defaults and reserved request keys.

Single source of truth for literal values shared by the query builders,
the search service and the result set.
"""

# Request keys that are always resolved from configuration + model
RESERVED_SEARCH_PARAMS = frozenset({"index", "type"})

# Shorthand defaults
DEFAULT_FUZZINESS = "AUTO"
DEFAULT_GEOSHAPE_TYPE = "envelope"
DEFAULT_MLT_MIN_TERM_FREQ = 1
DEFAULT_MLT_PERCENT_TERMS_TO_MATCH = 0.5
DEFAULT_MLT_MIN_WORD_LENGTH = 3

# Pagination
DEFAULT_PER_PAGE = 15

# Physical index name: "{index}{sep}{doc_type}" (one index per document type)
INDEX_TYPE_SEP = "-"

# Derived attribute keys on MappedResult
SCORE_ATTRIBUTE = "_score"
VERSION_ATTRIBUTE = "_version"
HIGHLIGHT_PREFIX = "highlighted"
