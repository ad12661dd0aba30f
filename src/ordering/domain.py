"""Ordering bounded context: order intake, payment confirmation and shipping.

Owns the Order aggregate and its lifecycle (pending → paid → shipped).
Email and proof-image storage are collaborators reached through ports.
"""

from protean.domain import Domain

from ordering.utils.logging import configure_logging

configure_logging()

ordering = Domain(name="ordering")
