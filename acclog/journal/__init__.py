"""
Journal module - entries, timeframe keys, aggregation and navigation.
"""

from acclog.journal.aggregator import BucketStats, bucket_entries, distinct_keys, stats
from acclog.journal.models import Entry, EntryCreate, Granularity, Insight
from acclog.journal.navigator import BucketNavigator
from acclog.journal.timekeys import bucket_key, bucket_label, parse_bucket_key

__all__ = [
    # Models
    "Entry",
    "EntryCreate",
    "Granularity",
    "Insight",
    # Time keys
    "bucket_key",
    "bucket_label",
    "parse_bucket_key",
    # Aggregation
    "BucketStats",
    "bucket_entries",
    "distinct_keys",
    "stats",
    # Navigation
    "BucketNavigator",
]
