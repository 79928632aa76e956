"""Frequent itemset mining with the A-Priori algorithm on Spark RDDs."""

from spark_apriori.a_priori import (
    InvalidParameterError,
    apriori,
    apriori_levels,
    apriori_step_one,
    count_candidate_support,
    generate_candidates,
    load_transactions,
)
from spark_apriori.association_rules import generate_association_rules

__version__ = "0.1.0"
