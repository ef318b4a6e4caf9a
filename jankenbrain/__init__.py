from .core import (
    JankenBrain,
    RandomSource,
    Recommendation,
    estimate_opponent_distribution,
    recommend,
    recommend_from_distribution,
)
from .counting import CountTables, compute_counts
from .errors import JankenBrainError, OptionsError, RecordError
from .experts import (
    ESTIMATORS,
    Estimator,
    FrequencyEstimator,
    RecencyEstimator,
    TransitionEstimator,
    get_estimator,
    select_estimator,
)
from .options import Options, default_options
from .records import Record, parse_record, parse_records, sort_records
from .stats import HistoryStatistics, compute_history_statistics
from .utils import EXPECTED_BASELINE, HANDS, SCORE_TABLE, Distribution, Hand, Outcome, payoff

__all__ = [
    "JankenBrain",
    "RandomSource",
    "Recommendation",
    "estimate_opponent_distribution",
    "recommend",
    "recommend_from_distribution",
    "CountTables",
    "compute_counts",
    "JankenBrainError",
    "OptionsError",
    "RecordError",
    "ESTIMATORS",
    "Estimator",
    "FrequencyEstimator",
    "RecencyEstimator",
    "TransitionEstimator",
    "get_estimator",
    "select_estimator",
    "Options",
    "default_options",
    "Record",
    "parse_record",
    "parse_records",
    "sort_records",
    "HistoryStatistics",
    "compute_history_statistics",
    "EXPECTED_BASELINE",
    "HANDS",
    "SCORE_TABLE",
    "Distribution",
    "Hand",
    "Outcome",
    "payoff",
]
