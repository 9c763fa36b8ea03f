"""Primary-key generators for searchable models."""

from cuid2 import cuid_wrapper

_cuid = cuid_wrapper()


def generate_cuid() -> str:
    """Return a new CUID2 string.

    Used as the default primary key of CuidMixin models, which also becomes
    the search document id, so it must always be a str.
    """
    value = _cuid()
    if not isinstance(value, str):
        raise TypeError(f"cuid2 returned {type(value).__name__}, expected str")
    return value
