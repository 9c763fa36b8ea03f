"""Shared utilities: id generation and attribute naming."""

from searchsync.shared.utils.generators import generate_cuid
from searchsync.shared.utils.naming import camel_case, highlight_attribute_name

__all__ = ["camel_case", "generate_cuid", "highlight_attribute_name"]
