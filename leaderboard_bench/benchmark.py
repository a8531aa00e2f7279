#!/usr/bin/env python3
"""
Load benchmark for the leaderboard service.

Reads a YAML config describing one or more runs (method, path, optional JSON
body) and drives each at several concurrency levels. Writes:
  - <run>_raw.csv      one row per request
  - <run>_summary.csv  one row per concurrency level
  - combined_summary.csv across all runs
"""

import argparse
import asyncio
import csv
import os
import sys
import time
import uuid
from statistics import mean

import aiohttp
import yaml

RAW_FIELDS = ["run_label", "concurrency", "req_id", "ok", "status", "latency_ms"]
SUMMARY_FIELDS = [
    "run_label", "concurrency", "requests", "ok", "errors", "elapsed_s", "throughput_rps",
    "latency_avg_ms", "latency_p50_ms", "latency_p95_ms", "latency_p99_ms",
]


# ------------------------------------------------------------
# Helper functions
def percentile(values, p):
    if not values:
        return float("nan")
    arr = sorted(values)
    k = (len(arr) - 1) * (p / 100.0)
    f = int(k)
    c = min(f + 1, len(arr) - 1)
    if f == c:
        return arr[f]
    return arr[f] + (arr[c] - arr[f]) * (k - f)


def load_yaml(path):
    with open(path, "r") as f:
        return yaml.safe_load(f)


def subst_placeholders(obj, ctx):
    """Replace ``${NAME}`` in every string of a nested body with ``ctx[NAME]``."""
    if isinstance(obj, str):
        s = obj
        for k, v in ctx.items():
            s = s.replace("${%s}" % k, str(v))
        return s
    if isinstance(obj, list):
        return [subst_placeholders(x, ctx) for x in obj]
    if isinstance(obj, dict):
        return {k: subst_placeholders(v, ctx) for k, v in obj.items()}
    return obj


def summarize(run_label, concurrency, latencies, ok_count, total_requests, elapsed):
    return {
        "run_label": run_label,
        "concurrency": concurrency,
        "requests": total_requests,
        "ok": ok_count,
        "errors": total_requests - ok_count,
        "elapsed_s": elapsed,
        "throughput_rps": ok_count / elapsed if elapsed > 0 else 0.0,
        "latency_avg_ms": mean(latencies) if latencies else float("nan"),
        "latency_p50_ms": percentile(latencies, 50),
        "latency_p95_ms": percentile(latencies, 95),
        "latency_p99_ms": percentile(latencies, 99),
    }


# ------------------------------------------------------------
async def one_request(session, method, url, json_body, timeout_s):
    t0 = time.perf_counter()
    try:
        async with session.request(method, url, json=json_body, timeout=timeout_s) as resp:
            await resp.read()
            return {
                "ok": 200 <= resp.status < 300,
                "status": resp.status,
                "latency_ms": (time.perf_counter() - t0) * 1000.0,
            }
    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
        return {"ok": False, "status": -1, "latency_ms": (time.perf_counter() - t0) * 1000.0, "error": repr(e)}


async def run_level(session, method, url, body_tpl, timeout_s, concurrency, total_requests, writer, run_label):
    latencies = []
    ok_count = 0
    sem = asyncio.Semaphore(concurrency)
    t_start = time.perf_counter()

    async def worker(req_id):
        nonlocal ok_count
        body = subst_placeholders(body_tpl, {"REQ_ID": req_id[:8], "CONCURRENCY": concurrency})
        async with sem:
            res = await one_request(session, method, url, body, timeout_s)
        latencies.append(res["latency_ms"])
        if res["ok"]:
            ok_count += 1
        writer.writerow({
            "run_label": run_label,
            "concurrency": concurrency,
            "req_id": req_id,
            "ok": int(res["ok"]),
            "status": res["status"],
            "latency_ms": f"{res['latency_ms']:.3f}",
        })

    tasks = [asyncio.create_task(worker(uuid.uuid4().hex)) for _ in range(total_requests)]
    await asyncio.gather(*tasks)

    elapsed = time.perf_counter() - t_start
    return summarize(run_label, concurrency, latencies, ok_count, total_requests, elapsed)


async def reset_board(session, base_url, password, timeout_s):
    async with session.post(f"{base_url}/erase", data={"password": password}, timeout=timeout_s) as resp:
        if resp.status != 200:
            print(f"[prepare] erase returned {resp.status}: {await resp.text()}", file=sys.stderr)


def write_csv(path, fieldnames, rows):
    with open(path, "w", newline="") as f:
        w = csv.DictWriter(f, fieldnames=fieldnames)
        w.writeheader()
        for row in rows:
            w.writerow(row)


# ------------------------------------------------------------
async def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("-c", "--config", default="config.yaml")
    args = ap.parse_args()

    cfg = load_yaml(args.config)
    base_url = cfg["base_url"].rstrip("/")
    outdir = cfg.get("output_dir", "./bench_runs")
    os.makedirs(outdir, exist_ok=True)
    timeout_s = aiohttp.ClientTimeout(total=float(cfg.get("timeout_seconds", 30.0)))

    async with aiohttp.ClientSession() as session:
        if cfg.get("admin_password"):
            print("[prepare] erasing leaderboard ...")
            await reset_board(session, base_url, cfg["admin_password"], timeout_s)

        all_rows = []
        for run in cfg["runs"]:
            name = run["name"]
            method = run.get("method", "GET").upper()
            url = f"{base_url}{run['path']}"
            body_tpl = run.get("json_body")
            conc_levels = run.get("concurrency_levels", [1, 2, 4, 8])
            per_level = int(run.get("requests_per_level", 100))
            warmup = int(run.get("warmup_requests", 0))

            print(f"[run:{name}] {method} {url}")
            if warmup > 0:
                await asyncio.gather(*[
                    one_request(session, method, url, subst_placeholders(body_tpl, {"REQ_ID": "warmup"}), timeout_s)
                    for _ in range(warmup)
                ])

            summaries = []
            with open(os.path.join(outdir, f"{name}_raw.csv"), "w", newline="") as fraw:
                writer = csv.DictWriter(fraw, fieldnames=RAW_FIELDS)
                writer.writeheader()
                for c in conc_levels:
                    print(f"  [concurrency={c}] running {per_level} requests ...")
                    s = await run_level(session, method, url, body_tpl, timeout_s, c, per_level, writer, name)
                    summaries.append(s)
                    print(f"    throughput={s['throughput_rps']:.2f} rps, ok={s['ok']}/{s['requests']}, "
                          f"p95={s['latency_p95_ms']:.1f} ms")

            write_csv(os.path.join(outdir, f"{name}_summary.csv"), SUMMARY_FIELDS, summaries)
            all_rows.extend(summaries)

    combined_path = os.path.join(outdir, "combined_summary.csv")
    write_csv(combined_path, SUMMARY_FIELDS, all_rows)
    print(f"\n[saved] combined_summary.csv -> {combined_path}")


# ------------------------------------------------------------
if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        print("Interrupted.", file=sys.stderr)
        sys.exit(1)
