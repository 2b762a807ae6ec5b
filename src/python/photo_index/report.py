"""
Run reports.

Converts the per-file outcomes of an indexing run into pandas DataFrames for
summaries and CSV export.
"""

from pathlib import Path
from typing import List

import pandas as pd

from photo_index.indexer.group import IndexOutcome

OUTCOME_COLUMNS = ["path", "relative_path", "file_type", "role", "result"]


def outcomes_to_dataframe(outcomes: List[IndexOutcome]) -> pd.DataFrame:
    """
    Convert index outcomes to a DataFrame with one row per file.

    Example:
        >>> df = outcomes_to_dataframe(walker.outcomes)
        >>> df[df["result"] == "Added"].head()
    """
    if not outcomes:
        return pd.DataFrame(columns=OUTCOME_COLUMNS)

    return pd.DataFrame([outcome.to_dict() for outcome in outcomes], columns=OUTCOME_COLUMNS)


def summarize_outcomes(outcomes: List[IndexOutcome]) -> pd.DataFrame:
    """
    Count files per file type and result.

    Returns:
        DataFrame indexed by file_type with one column per result
    """
    df = outcomes_to_dataframe(outcomes)
    if df.empty:
        return pd.DataFrame()

    return df.pivot_table(
        index="file_type",
        columns="result",
        values="path",
        aggfunc="count",
        fill_value=0,
    )


def write_report(outcomes: List[IndexOutcome], csv_path: Path) -> Path:
    """Write the outcomes of a run to a CSV file."""
    csv_path = Path(csv_path)
    csv_path.parent.mkdir(parents=True, exist_ok=True)
    outcomes_to_dataframe(outcomes).to_csv(csv_path, index=False)
    return csv_path
