from .batch_indexer import BatchIndexer
from .index_client import IndexClient
from .match_aggregator import MatchAggregator
from .match_store import MatchStore, deduplicate_matches
from .video_frame_preparer import VideoFramePreparer

__all__ = [
    "BatchIndexer",
    "IndexClient",
    "MatchAggregator",
    "MatchStore",
    "VideoFramePreparer",
    "deduplicate_matches",
]
