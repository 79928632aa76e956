"""
Command line entry point: mine frequent itemsets from a transaction file and
optionally derive association rules from them.
"""

import argparse
import time

from spark_apriori.a_priori import (
    InvalidParameterError,
    apriori,
    load_transactions,
    validate_max_k,
    validate_min_confidence,
    validate_min_support,
)
from spark_apriori.association_rules import generate_association_rules
from spark_apriori.reporting import print_levels, print_rules
from spark_apriori.spark_session import initialize_spark


def build_parser():
    parser = argparse.ArgumentParser(
        description="Find frequent itemsets with the A-Priori algorithm (Spark RDD)"
    )
    parser.add_argument(
        "--data",
        type=str,
        required=True,
        help="Path to data file, one transaction per line",
    )
    parser.add_argument(
        "--support",
        type=float,
        default=0.5,
        help="Minimum support as a fraction of transactions, in (0, 1] (default: 0.5)",
    )
    parser.add_argument(
        "--confidence",
        type=float,
        default=0.5,
        help="Minimum confidence threshold (default: 0.5)",
    )
    parser.add_argument(
        "--max-k",
        type=int,
        default=None,
        help="Largest itemset size to mine (default: unlimited)",
    )
    parser.add_argument(
        "--marker",
        type=str,
        default=None,
        help="Item separator in each line (default: whitespace)",
    )
    parser.add_argument(
        "--partitions",
        type=int,
        default=None,
        help="Minimum number of input partitions",
    )
    parser.add_argument(
        "--master",
        type=str,
        default="local[*]",
        help="Spark master URL (default: local[*])",
    )
    parser.add_argument(
        "--top",
        type=int,
        default=20,
        help="Number of top itemsets/rules to display (default: 20)",
    )
    parser.add_argument(
        "--rules",
        action="store_true",
        help="Also generate association rules",
    )
    parser.add_argument("--verbose", action="store_true")
    return parser


def validate_args(args):
    """Check the mining thresholds before any Spark work starts."""
    validate_min_support(args.support)
    validate_min_confidence(args.confidence)
    validate_max_k(args.max_k)


def run(sc, args):
    """
    Load the data, mine frequent itemsets and print the results.

    Args:
        sc: SparkContext
        args: Parsed command line arguments

    Returns:
        Tuple of (frequent_itemsets, rules); rules is None unless --rules is set
    """
    validate_args(args)
    start_total = time.time()

    print("\n[Step 1] Loading transactions...")
    transactions_rdd = load_transactions(
        sc, args.data, marker=args.marker, num_partitions=args.partitions
    ).cache()

    try:
        num_transactions = transactions_rdd.count()
        print(f"Loaded {num_transactions:,} transactions")

        print("\n[Step 2] Running A-Priori algorithm to find frequent itemsets...")
        start = time.time()
        frequent_itemsets = apriori(
            transactions_rdd, args.support, max_k=args.max_k, verbose=args.verbose
        )
        print(f"A-Priori finished in {time.time()-start:.2f}s")
        print_levels(frequent_itemsets, num_transactions, args.top)

        rules = None
        if args.rules:
            print("\n[Step 3] Generating association rules...")
            rules = generate_association_rules(sc, frequent_itemsets, args.confidence)
            print_rules(rules, args.top)

        print(f"\nTotal execution time: {time.time() - start_total:.2f}s")
        return frequent_itemsets, rules

    finally:
        transactions_rdd.unpersist()


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        validate_args(args)
    except InvalidParameterError as exc:
        parser.error(str(exc))

    print("=" * 70)
    print("A-PRIORI FREQUENT ITEMSETS (SPARK RDD)")
    print("=" * 70)
    print(f"Data file: {args.data}")
    print(f"Minimum support: {args.support}")
    if args.rules:
        print(f"Minimum confidence: {args.confidence}")
    print(f"Max K: {args.max_k if args.max_k else 'unlimited'}")
    print("=" * 70)

    sc = initialize_spark("SparkApriori", master=args.master)

    try:
        return run(sc, args)
    finally:
        sc.stop()


if __name__ == "__main__":
    main()
