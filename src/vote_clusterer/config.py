"""Configuration constants for the vote clusterer."""

DEFAULT_TRAINING_PATH = "data/congress_train.csv"
DEFAULT_NUMBER_OF_BILLS = 42
DEFAULT_TARGET_CLUSTERS = 10

FIELD_DELIMITER = ","  # input: one entity per line, vote tokens first
OUTPUT_SEPARATOR = ","  # output: members of one cluster per line

LINKAGE_SCALE = 100.0  # average-link distances are reported as percentages

DEFAULT_METRIC = "disagreement"
METRICS = ("disagreement", "jaccard")

RESULTS_ROOT = "results"
