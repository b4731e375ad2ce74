"""Constants for dump import: batching, column limits and namespace categories."""

from datetime import UTC, datetime

# Batching and progress
DEFAULT_BATCH_SIZE = 1000
PROGRESS_LOG_INTERVAL = 10_000

# Persisted column limits
POST_TITLE_MAX_LENGTH = 512
CATEGORY_NAME_MAX_LENGTH = 255
TAG_NAME_MAX_LENGTH = 255

# Dumps carry no author; posts are spread uniformly over users 1..DEFAULT_USER_COUNT
DEFAULT_USER_COUNT = 100_000

# Window for created_at when the dump carries no timestamp (end exclusive)
RANDOM_CREATED_AT_START = datetime(2020, 1, 1, tzinfo=UTC)
RANDOM_CREATED_AT_END = datetime(2025, 12, 31, 23, 59, 59, tzinfo=UTC)

# Key correlation strategies for associative rows
KEY_CORRELATION_RETURNING = "returning"
KEY_CORRELATION_MAX_ID = "max_id"
KEY_CORRELATION_CHOICES = (KEY_CORRELATION_RETURNING, KEY_CORRELATION_MAX_ID)
DEFAULT_KEY_CORRELATION = KEY_CORRELATION_RETURNING

# MediaWiki namespace number -> category name (Korean wiki board names)
NAMESPACE_CATEGORY_NAMES = {
    0: "일반 문서",
    1: "토론",
    2: "사용자",
    3: "사용자토론",
    4: "프로젝트",
    5: "프로젝트토론",
    6: "파일",
    7: "파일토론",
    8: "미디어위키",
    9: "미디어위키토론",
    10: "틀",
    11: "틀토론",
    12: "도움말",
    13: "도움말토론",
    14: "분류",
    15: "분류토론",
}

# Every page of a JSON (NamuWiki) dump lands in this single category
SYNTHETIC_NAMESPACE_CATEGORY_NAME = "나무위키"

UNMAPPED_NAMESPACE_CATEGORY_TEMPLATE = "기타 (ns={namespace})"
