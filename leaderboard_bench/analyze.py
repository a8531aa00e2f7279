#!/usr/bin/env python3
"""
Plots for a leaderboard benchmark output directory.

  throughput.png      ok requests/s per run vs concurrency (combined summary)
  latency_<run>.png   latency distribution per concurrency (raw CSVs)
  errors.png          failure share per run vs concurrency (raw CSVs)
  status_submit.png   status codes of the /submit run, where writers
                      queue on the store lock
"""
import argparse
import os

import matplotlib.pyplot as plt
import pandas as pd
import seaborn as sns

from leaderboard_bench.results import error_rates, latency_spread, load_raw_runs, status_counts

sns.set(style="whitegrid", font_scale=1.1)


def save(fig, outdir, name):
    path = os.path.join(outdir, name)
    fig.tight_layout()
    fig.savefig(path, dpi=160)
    plt.close(fig)
    print(f"[saved] {path}")


def plot_throughput(summary, outdir):
    fig, ax = plt.subplots(figsize=(8, 5))
    sns.lineplot(data=summary, x="concurrency", y="throughput_rps", hue="run_label", marker="o", ax=ax)
    ax.set(title="Throughput by route", xlabel="Concurrent clients", ylabel="OK requests / s")
    save(fig, outdir, "throughput.png")


def plot_latency(raw, outdir):
    ok = raw[raw["ok"] == 1]
    for run_label, run in ok.groupby("run_label"):
        fig, ax = plt.subplots(figsize=(8, 5))
        sns.boxplot(data=run, x="concurrency", y="latency_ms", ax=ax, showfliers=False)
        ax.set(title=f"Latency: {run_label}", xlabel="Concurrent clients", ylabel="Latency (ms)")
        save(fig, outdir, f"latency_{run_label}.png")


def plot_errors(raw, outdir):
    rates = error_rates(raw)
    fig, ax = plt.subplots(figsize=(8, 5))
    sns.barplot(data=rates, x="concurrency", y="error_rate", hue="run_label", ax=ax)
    ax.set(title="Failed requests", xlabel="Concurrent clients", ylabel="Share of requests")
    ax.set_ylim(0, 1)
    save(fig, outdir, "errors.png")


def plot_submit_status(raw, outdir, run_label):
    if run_label not in set(raw["run_label"]):
        print(f"[skip] no run named {run_label!r}")
        return
    table = status_counts(raw, run_label)
    fig, ax = plt.subplots(figsize=(8, 5))
    table.plot(kind="bar", stacked=True, ax=ax)
    ax.set(title=f"Status codes: {run_label}", xlabel="Concurrent clients", ylabel="Responses")
    ax.legend(title="HTTP status")
    save(fig, outdir, f"status_{run_label}.png")


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--runs", default="./bench_runs", help="benchmark output_dir")
    ap.add_argument("--outdir", default="./bench_plots", help="output directory for plots")
    ap.add_argument("--submit-run", default="submit", help="run name that POSTs /submit")
    args = ap.parse_args()
    os.makedirs(args.outdir, exist_ok=True)

    raw = load_raw_runs(args.runs)
    print(f"[info] {len(raw)} requests across runs {sorted(raw['run_label'].unique())}")
    summary = pd.read_csv(os.path.join(args.runs, "combined_summary.csv"))
    print(latency_spread(raw).to_string(index=False))

    plot_throughput(summary, args.outdir)
    plot_latency(raw, args.outdir)
    plot_errors(raw, args.outdir)
    plot_submit_status(raw, args.outdir, args.submit_run)


if __name__ == "__main__":
    main()
