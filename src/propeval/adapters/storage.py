from pathlib import Path

import pandas as pd

_READERS = {
    ".parquet": pd.read_parquet,
    ".csv": pd.read_csv,
    ".json": pd.read_json,
}


def read_frame(path: str | Path) -> pd.DataFrame:
    """Property records for batch evaluation; format picked by suffix."""
    p = Path(path)
    reader = _READERS.get(p.suffix.lower())
    if reader is None:
        raise ValueError(f"unsupported input format: {p.suffix or path}")
    return reader(p)


def write_frame(df: pd.DataFrame, path: str | Path) -> Path:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    suffix = p.suffix.lower()
    if suffix == ".parquet":
        df.to_parquet(p, index=False)
    elif suffix == ".json":
        df.to_json(p, orient="records")
    else:
        df.to_csv(p, index=False)
    return p
