from typing import Final

KEY: Final[str] = "_key"
"""The attribute holding the document key."""

ID: Final[str] = "_id"
"""The store-wide document handle (`collection/key`)."""

REV: Final[str] = "_rev"
"""The revision attribute written by the store."""

SCORE: Final[str] = "_score"
"""Reserved row attribute carrying a full-text-search score."""

EXPIRES_AT: Final[str] = "expires_at"
"""Attribute holding the absolute expiry timestamp watched by the TTL index."""

TTL_IN_SECONDS_INCLUSIVE_END: Final[int] = 30 * 24 * 60 * 60
"""Largest expiry still sent as a relative TTL; anything above is an absolute Unix timestamp."""
