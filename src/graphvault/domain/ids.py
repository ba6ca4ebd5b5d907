"""Entity hash generation.

Hashes are opaque identifiers, not content digests: a random UUID4
rendered as a lowercase string, assigned once at construction. Callers
may supply their own hash instead; any non-empty string is accepted.

INVARIANT: Hashes are permanent. Once assigned, a hash never changes.
"""

from __future__ import annotations

import uuid


def generate_hash() -> str:
    """Return a fresh random identifier for a node or relation."""
    return str(uuid.uuid4())
