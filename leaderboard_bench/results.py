"""Load benchmark CSVs written by ``benchmark.py`` into DataFrames."""
import glob
import os

import pandas as pd

RAW_SUFFIX = "_raw.csv"


def load_raw_runs(outdir):
    """Concatenate every ``<run>_raw.csv`` in ``outdir``, one row per request."""
    paths = sorted(glob.glob(os.path.join(outdir, f"*{RAW_SUFFIX}")))
    if not paths:
        raise FileNotFoundError(f"no *{RAW_SUFFIX} files in {outdir}")
    frames = [pd.read_csv(p) for p in paths]
    return pd.concat(frames, ignore_index=True)


def error_rates(raw):
    """Per run and concurrency: request count, failed count and failure share.

    A request failed when the service answered non-2xx or the connection
    broke (status -1).
    """
    grouped = raw.groupby(["run_label", "concurrency"])
    out = grouped.agg(requests=("ok", "size"), ok=("ok", "sum")).reset_index()
    out["errors"] = out["requests"] - out["ok"]
    out["error_rate"] = out["errors"] / out["requests"]
    return out


def status_counts(raw, run_label):
    """Responses by status code for one run, concurrency on the rows."""
    run = raw[raw["run_label"] == run_label]
    table = pd.crosstab(run["concurrency"], run["status"])
    table.columns = [str(c) for c in table.columns]
    return table


def latency_spread(raw):
    """Latency quartiles per run and concurrency, successful requests only."""
    ok = raw[raw["ok"] == 1]
    q = ok.groupby(["run_label", "concurrency"])["latency_ms"].quantile([0.25, 0.5, 0.75]).unstack()
    q.columns = ["latency_q1_ms", "latency_median_ms", "latency_q3_ms"]
    return q.reset_index()
