"""
Measurement: Compare Execution Time vs Support Threshold
Runs the A-Priori miner once per support threshold on the same cached data,
generates association rules from each result, and reports the timings as a
table, a CSV file and a graph.
"""

import argparse
import csv
import time

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import numpy as np

from spark_apriori.a_priori import (
    InvalidParameterError,
    apriori,
    load_transactions,
    validate_min_confidence,
    validate_min_support,
)
from spark_apriori.association_rules import generate_association_rules
from spark_apriori.spark_session import initialize_spark

FIELDNAMES = [
    "support",
    "num_itemsets",
    "num_levels",
    "num_rules",
    "apriori_time",
    "rule_generation_time",
    "total_time",
]


def validate_thresholds(support_thresholds, min_confidence):
    for min_support in support_thresholds:
        validate_min_support(min_support)
    validate_min_confidence(min_confidence)


def measure_support_thresholds(sc, transactions_rdd, support_thresholds, min_confidence):
    """
    Mine frequent itemsets and rules for each support threshold and time both steps.

    Args:
        sc: SparkContext
        transactions_rdd: RDD of item sequences; cache it before calling
        support_thresholds: Iterable of minimum supports, each in (0, 1]
        min_confidence: Minimum confidence for rule generation

    Returns:
        List of result dicts keyed by FIELDNAMES, in threshold order
    """
    support_thresholds = list(support_thresholds)
    validate_thresholds(support_thresholds, min_confidence)
    results = []

    for min_support in support_thresholds:
        print(f"\nTesting support threshold: {min_support}")
        print("-" * 80)

        start = time.time()
        frequent_itemsets = apriori(transactions_rdd, min_support)
        apriori_time = time.time() - start

        start = time.time()
        rules = generate_association_rules(sc, frequent_itemsets, min_confidence)
        rule_generation_time = time.time() - start

        num_levels = max((len(itemset) for itemset, _ in frequent_itemsets), default=0)
        results.append(
            {
                "support": min_support,
                "num_itemsets": len(frequent_itemsets),
                "num_levels": num_levels,
                "num_rules": len(rules),
                "apriori_time": apriori_time,
                "rule_generation_time": rule_generation_time,
                "total_time": apriori_time + rule_generation_time,
            }
        )

        print(f"  A-Priori time: {apriori_time:.4f}s")
        print(f"  Frequent itemsets: {len(frequent_itemsets):,} ({num_levels} levels)")
        print(f"  Rules: {len(rules):,} in {rule_generation_time:.4f}s")

    return results


def summarize(results):
    """
    Compute timing statistics over a sweep.

    Returns:
        Dictionary with min/max/mean A-Priori time, the supports of the fastest
        and slowest runs, and the slowest/fastest speedup (0.0 if undefined)
    """
    if not results:
        return {}

    times = np.array([r["apriori_time"] for r in results], dtype=float)
    fastest = int(np.argmin(times))
    slowest = int(np.argmax(times))
    speedup = float(times[slowest] / times[fastest]) if times[fastest] > 0 else 0.0

    return {
        "min_time": float(times.min()),
        "max_time": float(times.max()),
        "mean_time": float(times.mean()),
        "fastest_support": results[fastest]["support"],
        "slowest_support": results[slowest]["support"],
        "speedup": speedup,
    }


def print_summary(results):
    print("\n" + "=" * 80)
    print("SUMMARY: SUPPORT THRESHOLD vs EXECUTION TIME")
    print("=" * 80)
    print(
        f"{'Support':<10} {'Itemsets':<10} {'Levels':<8} {'Rules':<10} "
        f"{'A-Priori (s)':<14} {'Total (s)':<10}"
    )
    print("-" * 80)

    for r in results:
        print(
            f"{r['support']:<10.3f} "
            f"{r['num_itemsets']:<10,} "
            f"{r['num_levels']:<8} "
            f"{r['num_rules']:<10,} "
            f"{r['apriori_time']:<14.4f} "
            f"{r['total_time']:<10.4f}"
        )

    stats = summarize(results)
    if stats:
        print("=" * 80)
        print(
            f"Fastest: support={stats['fastest_support']} ({stats['min_time']:.4f}s)"
        )
        print(
            f"Slowest: support={stats['slowest_support']} ({stats['max_time']:.4f}s)"
        )
        print(f"Speedup: {stats['speedup']:.2f}x")


def save_results_csv(results, csv_filename):
    with open(csv_filename, "w", newline="") as csvfile:
        writer = csv.DictWriter(csvfile, fieldnames=FIELDNAMES)
        writer.writeheader()
        for result in results:
            writer.writerow({name: result[name] for name in FIELDNAMES})


def plot_results(results, graph_filename):
    """Save a two-panel graph: time vs support and itemset count vs support."""
    supports = [r["support"] for r in results]
    apriori_times = [r["apriori_time"] for r in results]
    num_itemsets = [r["num_itemsets"] for r in results]

    fig, (ax1, ax2) = plt.subplots(1, 2, figsize=(14, 6))

    ax1.plot(
        supports, apriori_times, marker="o", linewidth=2, markersize=8, color="#2E86AB"
    )
    ax1.fill_between(supports, apriori_times, alpha=0.3, color="#2E86AB")
    ax1.set_xlabel("Support Threshold", fontsize=12, fontweight="bold")
    ax1.set_ylabel("Execution Time (seconds)", fontsize=12, fontweight="bold")
    ax1.set_title("Support Threshold vs A-Priori Time", fontsize=13, fontweight="bold")
    ax1.grid(True, alpha=0.3, linestyle="--")
    for support, elapsed in zip(supports, apriori_times):
        ax1.annotate(
            f"{elapsed:.2f}s",
            (support, elapsed),
            textcoords="offset points",
            xytext=(0, 10),
            ha="center",
            fontsize=9,
        )

    ax2.plot(
        supports, num_itemsets, marker="s", linewidth=2, markersize=8, color="#A23B72"
    )
    ax2.fill_between(supports, num_itemsets, alpha=0.3, color="#A23B72")
    ax2.set_xlabel("Support Threshold", fontsize=12, fontweight="bold")
    ax2.set_ylabel("Frequent Itemsets", fontsize=12, fontweight="bold")
    ax2.set_title(
        "Support Threshold vs Frequent Itemsets", fontsize=13, fontweight="bold"
    )
    ax2.grid(True, alpha=0.3, linestyle="--")
    ax2.ticklabel_format(style="plain", axis="y")

    fig.suptitle(
        "Support Threshold Analysis: Execution Time and Frequent Itemsets",
        fontsize=16,
        fontweight="bold",
    )
    fig.tight_layout()
    fig.savefig(graph_filename, dpi=150, bbox_inches="tight")
    plt.close(fig)


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Measure A-Priori execution time across support thresholds"
    )
    parser.add_argument("--data", type=str, required=True, help="Path to data file")
    parser.add_argument(
        "--supports",
        type=float,
        nargs="+",
        default=[0.5, 0.4, 0.3, 0.2, 0.1],
        help="Support thresholds to test (default: 0.5 0.4 0.3 0.2 0.1)",
    )
    parser.add_argument(
        "--confidence",
        type=float,
        default=0.5,
        help="Minimum confidence threshold (default: 0.5)",
    )
    parser.add_argument(
        "--csv",
        type=str,
        default="support_time_measurement.csv",
        help="Output CSV file",
    )
    parser.add_argument(
        "--graph",
        type=str,
        default="support_time_measurement.png",
        help="Output graph file",
    )
    parser.add_argument("--master", type=str, default="local[*]")
    args = parser.parse_args(argv)
    try:
        validate_thresholds(args.supports, args.confidence)
    except InvalidParameterError as exc:
        parser.error(str(exc))

    print("=" * 80)
    print("SUPPORT THRESHOLD vs EXECUTION TIME MEASUREMENT")
    print("=" * 80)
    print(f"Support Thresholds: {args.supports}")
    print(f"Min Confidence: {args.confidence}")
    print("=" * 80)

    sc = initialize_spark("SupportThresholdMeasurement", master=args.master)
    transactions_rdd = None

    try:
        transactions_rdd = load_transactions(sc, args.data).cache()
        print(f"\nLoaded {transactions_rdd.count():,} transactions")

        results = measure_support_thresholds(
            sc, transactions_rdd, args.supports, args.confidence
        )
        print_summary(results)

        save_results_csv(results, args.csv)
        print(f"\nResults saved to {args.csv}")
        plot_results(results, args.graph)
        print(f"Graph saved to {args.graph}")

        return results

    finally:
        if transactions_rdd is not None:
            transactions_rdd.unpersist()
        sc.stop()


if __name__ == "__main__":
    main()
