from .schema import DIFFICULTIES, DTYPES, SessionRecord
from .highscore import HIGH_SCORE_KEY, JsonHighScoreStore
from .store import (
    init_store,
    make_record,
    validate_records,
    append_session_records,
    record_session,
    load_all,
    query_trend,
    best_score,
    export_ndjson,
)

__all__ = [
    "DIFFICULTIES",
    "DTYPES",
    "SessionRecord",
    "HIGH_SCORE_KEY",
    "JsonHighScoreStore",
    "init_store",
    "make_record",
    "validate_records",
    "append_session_records",
    "record_session",
    "load_all",
    "query_trend",
    "best_score",
    "export_ndjson",
]
