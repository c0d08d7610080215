"""
Composite key scheme for the metadata store.

The store has no secondary indexes: every lookup the service needs is either an
exact key or a prefix scan over a key built here. Keys are a fixed domain prefix
followed by identifier segments, all joined with ``:``.

    file:<fileId>                      canonical FileRecord
    user_files:<ownerId>:<fileId>      ownership index entry
    insights:<insightId>               every generated InsightRecord
    file_insights:<fileId>             current InsightRecord of a file
    user:<userId>                      local identity provider account
    user_email:<email>                 local account lookup by email
"""
from typing import Tuple

SEPARATOR = ":"

FILE = "file"
USER_FILES = "user_files"
INSIGHTS = "insights"
FILE_INSIGHTS = "file_insights"
USER = "user"
USER_EMAIL = "user_email"


def _segment(value) -> str:
    text = str(value)
    if not text:
        raise ValueError("Key segment must not be empty")
    if SEPARATOR in text:
        raise ValueError(f"Key segment must not contain '{SEPARATOR}': {text!r}")
    return text


def build_key(prefix: str, *segments) -> str:
    return SEPARATOR.join([prefix, *(_segment(s) for s in segments)])


def build_prefix(prefix: str, *segments) -> str:
    """Scan prefix that always ends with the separator (u1 never matches u10)."""
    return build_key(prefix, *segments) + SEPARATOR


def file_key(file_id) -> str:
    return build_key(FILE, file_id)


def user_file_key(owner_id, file_id) -> str:
    return build_key(USER_FILES, owner_id, file_id)


def user_files_prefix(owner_id) -> str:
    return build_prefix(USER_FILES, owner_id)


def insight_key(insight_id) -> str:
    return build_key(INSIGHTS, insight_id)


def file_insights_key(file_id) -> str:
    return build_key(FILE_INSIGHTS, file_id)


def user_key(user_id) -> str:
    return build_key(USER, user_id)


def user_email_key(email: str) -> str:
    # Quoted local parts may contain the separator; percent-encode it (and "%" itself first)
    normalised = email.strip().lower().replace("%", "%25").replace(SEPARATOR, "%3A")
    return build_key(USER_EMAIL, normalised)


def split_key(key: str) -> Tuple[str, ...]:
    return tuple(key.split(SEPARATOR))
