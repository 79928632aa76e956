"""
A-Priori Algorithm - Cartesian Implementation with Spark RDD
Finds every itemset whose support reaches min_support * (number of transactions).

Level 1 is found with a single counting pass over the transactions. Every later
level k is built in two steps:
    1. candidate generation: union every pair of frequent (k-1)-itemsets and keep
       the distinct unions of size exactly k
    2. support counting: pair every transaction with every candidate, count the
       pairs where the candidate is a subset of the transaction and keep the
       candidates that reach the threshold
The loop keeps going while the last level holds more than one itemset.
"""

import numbers
import time

from pyspark import StorageLevel

from spark_apriori.itemsets import flatten_levels, to_itemset


class InvalidParameterError(ValueError):
    """Raised when a mining threshold is outside its valid range."""


def validate_min_support(min_support):
    if (
        isinstance(min_support, bool)
        or not isinstance(min_support, numbers.Real)
        or not 0 < min_support <= 1
    ):
        raise InvalidParameterError(
            f"min_support must be in (0, 1], got {min_support!r}"
        )


def validate_min_confidence(min_confidence):
    if (
        isinstance(min_confidence, bool)
        or not isinstance(min_confidence, numbers.Real)
        or not 0 <= min_confidence <= 1
    ):
        raise InvalidParameterError(
            f"min_confidence must be in [0, 1], got {min_confidence!r}"
        )


def validate_max_k(max_k):
    if max_k is None:
        return
    if isinstance(max_k, bool) or not isinstance(max_k, numbers.Integral) or max_k < 1:
        raise InvalidParameterError(f"max_k must be at least 1, got {max_k!r}")


def parse_line(line, marker=None):
    """Split one raw line into item tokens, dropping empty tokens."""
    return [token for token in line.strip().split(marker) if token]


def load_transactions(sc, path, marker=None, num_partitions=None):
    """
    Load transactions from a text file, one transaction per line.

    Args:
        sc: SparkContext
        path: Path to the data file
        marker: Token separator (default: any whitespace)
        num_partitions: Minimum number of partitions for the input

    Returns:
        RDD of item lists; blank lines are dropped
    """
    if num_partitions:
        lines = sc.textFile(path, num_partitions)
    else:
        lines = sc.textFile(path)

    return lines.map(lambda line: parse_line(line, marker)).filter(
        lambda txn: len(txn) > 0
    )


# ============================================================================
# STEP 1: Find frequent single items (L1)
# ============================================================================
def apriori_step_one(data_set, min_count):
    """
    Count single items and keep the frequent ones.

    Args:
        data_set: RDD of transactions (frozensets)
        min_count: Minimum support count; compared as a real number, never rounded

    Returns:
        RDD of (frozenset([item]), support)
    """
    return (
        data_set.flatMap(lambda transaction: transaction)
        .map(lambda item: (item, 1))
        .reduceByKey(lambda a, b: a + b)
        .filter(lambda x: x[1] >= min_count)
        .map(lambda x: (frozenset([x[0]]), x[1]))
    )


# ============================================================================
# STEP 2: Candidate generation and support counting for any k
# ============================================================================
def generate_candidates(level_itemsets, k):
    """
    Generate candidate k-itemsets from the frequent (k-1)-itemsets.

    Every ordered pair of the level with itself is unioned, self pairs and
    mirrored pairs included; duplicates collapse in distinct().

    Args:
        level_itemsets: RDD of frequent (k-1)-itemsets
        k: Size of candidates to generate

    Returns:
        RDD of distinct candidate k-itemsets
    """
    return (
        level_itemsets.cartesian(level_itemsets)
        .map(lambda pair: pair[0] | pair[1])
        .filter(lambda itemset: len(itemset) == k)
        .distinct()
    )


def count_candidate_support(data_set, candidates, min_count):
    """
    Count the support of every candidate with a full scan and keep the frequent ones.

    Args:
        data_set: RDD of transactions (frozensets)
        candidates: RDD of candidate itemsets
        min_count: Minimum support count

    Returns:
        RDD of (itemset, support)
    """
    # every (transaction, candidate) pair emits 0 or 1, so each candidate
    # gets a key even when it matches no transaction
    return (
        data_set.cartesian(candidates)
        .map(lambda pair: (pair[1], 1 if pair[1] <= pair[0] else 0))
        .reduceByKey(lambda a, b: a + b)
        .filter(lambda x: x[1] >= min_count)
    )


# ============================================================================
# DRIVER
# ============================================================================
def apriori_levels(input_rdd, min_support, max_k=None, verbose=False):
    """
    Run the level-wise loop and collect every frequent level.

    Args:
        input_rdd: RDD of item sequences, one per transaction (duplicates allowed)
        min_support: Minimum support as a fraction of transactions, in (0, 1]
        max_k: Largest itemset size to mine, None for unlimited
        verbose: Print one progress line per level

    Returns:
        List of collected levels [L1, L2, ...], each a list of (itemset, support).
        Empty list when no single item is frequent.
    """
    validate_min_support(min_support)
    validate_max_k(max_k)

    data_set_len = input_rdd.count()
    min_count = min_support * data_set_len
    if verbose:
        print(f"Transactions: {data_set_len:,} | Min count: {min_count:g}")

    data_set = input_rdd.map(to_itemset).persist(StorageLevel.MEMORY_AND_DISK)
    levels = []
    # registered before the first action on each, so a failed job still frees them
    cached = [data_set]

    try:
        start = time.time()
        level_1 = apriori_step_one(data_set, min_count).cache()
        cached.append(level_1)
        level_size = level_1.count()
        if verbose:
            print(
                f"[K=1] Found {level_size:,} frequent items in {time.time()-start:.2f}s"
            )

        if level_size == 0:
            return []

        levels.append(level_1)
        sizes = [level_size]
        k = 2

        # stops as soon as a level holds a single itemset, not only when empty
        while sizes[-1] > 1 and (max_k is None or k <= max_k):
            start = time.time()
            candidates = generate_candidates(levels[-1].map(lambda x: x[0]), k)
            if verbose:
                candidates = candidates.cache()
                cached.append(candidates)
                print(f"[K={k}] Generated {candidates.count():,} candidates")

            level_k = count_candidate_support(data_set, candidates, min_count).cache()
            cached.append(level_k)
            levels.append(level_k)
            sizes.append(level_k.count())
            if verbose:
                print(
                    f"[K={k}] Found {sizes[-1]:,} frequent {k}-itemsets "
                    f"in {time.time()-start:.2f}s"
                )
                candidates.unpersist()
            k += 1

        return [level.collect() for level in levels]

    finally:
        for rdd in cached:
            rdd.unpersist()


def apriori(input_rdd, min_support, max_k=None, verbose=False):
    """
    Mine all frequent itemsets.

    Args:
        input_rdd: RDD of item sequences, one per transaction
        min_support: Minimum support as a fraction of transactions, in (0, 1]
        max_k: Largest itemset size to mine, None for unlimited
        verbose: Print one progress line per level

    Returns:
        List of (itemset, support) pairs in level order (all 1-itemsets first)
    """
    return flatten_levels(apriori_levels(input_rdd, min_support, max_k, verbose))
