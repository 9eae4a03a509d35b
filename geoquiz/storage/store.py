from __future__ import annotations

"""Parquet store for finished-session history."""

import logging
from pathlib import Path
from typing import Any, Mapping, Optional
from uuid import uuid4

import pandas as pd

from ..errors import StorageUnavailable
from .schema import DIFFICULTIES, DTYPES, SessionRecord

log = logging.getLogger(__name__)

DATA_FILE = "sessions.parquet"


def _empty_df() -> pd.DataFrame:
    return pd.DataFrame({k: pd.Series(dtype=v) for k, v in DTYPES.items()})


def _fix_dtypes(df: pd.DataFrame) -> pd.DataFrame:
    for col, dt in DTYPES.items():
        if col not in df.columns:
            df[col] = pd.Series(0 if col == "duration_s" else pd.NA, index=df.index)
        df[col] = df[col].astype(dt)
    return df[list(DTYPES.keys())]


def init_store(data_dir: Path) -> None:
    data_dir = Path(data_dir)
    try:
        data_dir.mkdir(parents=True, exist_ok=True)
        path = data_dir / DATA_FILE
        if not path.exists():
            _empty_df().to_parquet(path, engine="pyarrow", compression="zstd", index=False)
    except OSError as exc:
        raise StorageUnavailable(f"Cannot initialise history store in {data_dir}: {exc}") from exc


def make_record(row: Mapping[str, Any], session_id: Optional[str] = None) -> SessionRecord:
    data = dict(row)
    data.setdefault("session_id", session_id or str(uuid4()))
    return SessionRecord.model_validate(data)


def validate_records(records: list[SessionRecord]) -> pd.DataFrame:
    if not isinstance(records, list):
        raise TypeError("records must be a list[SessionRecord]")
    rows = [r if isinstance(r, SessionRecord) else SessionRecord.model_validate(r) for r in records]
    df = pd.DataFrame([r.model_dump() for r in rows])
    if df.empty:
        return _empty_df()
    return _fix_dtypes(df)


def append_session_records(df_new: pd.DataFrame, data_dir: Path) -> None:
    f = Path(data_dir) / DATA_FILE
    try:
        df_old = pd.read_parquet(f, engine="pyarrow") if f.exists() else _empty_df()
        combined = pd.concat([_fix_dtypes(df_old), _fix_dtypes(df_new.copy())], ignore_index=True)
        combined = combined.drop_duplicates(subset=["session_id"], keep="last")
        combined.to_parquet(f, engine="pyarrow", compression="zstd", index=False)
    except OSError as exc:
        raise StorageUnavailable(f"Cannot write session history {f}: {exc}") from exc
    log.debug("Appended %d session row(s) to %s", len(df_new), f)


def record_session(row: Mapping[str, Any], data_dir: Path) -> SessionRecord:
    """Validate one finished session and append it to the history."""
    rec = make_record(row)
    init_store(Path(data_dir))
    append_session_records(validate_records([rec]), Path(data_dir))
    return rec


def load_all(data_dir: Path) -> pd.DataFrame:
    f = Path(data_dir) / DATA_FILE
    if not f.exists():
        return _empty_df().assign(accuracy=pd.Series(dtype="float32"))
    try:
        df = pd.read_parquet(f, engine="pyarrow")
    except OSError as exc:
        raise StorageUnavailable(f"Cannot read session history {f}: {exc}") from exc
    df = _fix_dtypes(df)
    answered = df["answered"].astype("float32").where(df["answered"] > 0, other=1.0)
    df["accuracy"] = (df["correct"].astype("float32") / answered).astype("float32")
    return df


def query_trend(df: pd.DataFrame, *, difficulty: str) -> pd.DataFrame:
    if difficulty not in DIFFICULTIES:
        raise ValueError(f"Unknown difficulty: {difficulty}")
    dff = df[df["difficulty"].astype("string") == difficulty]
    return dff.sort_values("session_start").reset_index(drop=True)


def best_score(df: pd.DataFrame, difficulty: Optional[str] = None) -> int:
    g = df if difficulty is None else query_trend(df, difficulty=difficulty)
    if g.empty:
        return 0
    return int(g["score"].max())


def export_ndjson(df: pd.DataFrame, out_path: Path) -> None:
    Path(out_path).parent.mkdir(parents=True, exist_ok=True)
    df.to_json(out_path, orient="records", lines=True, date_format="iso")
