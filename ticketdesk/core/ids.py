"""Opaque record identifiers."""

from uuid import uuid4


def new_id(kind: str) -> str:
    """
    Generate an id of the shape ``<kind>_<hex>``.

    The suffix is a random 128-bit UUID4, so ids stay unique without
    coordination between writers.
    """
    return f"{kind}_{uuid4().hex}"
