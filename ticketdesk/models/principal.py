"""Externally authenticated identity."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Principal:
    """
    Identity asserted by the external auth provider.

    Never persisted. A principal only gains a role once it is bound to a
    tenant user record within a specific company.
    """

    id: str
    email: str
    name: str | None = None
