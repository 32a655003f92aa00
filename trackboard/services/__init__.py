"""Service modules for trackboard."""

from .data_source import JsonSnapshotSource, TrackerDataSource
from .weekly_service import EntryBucketSource, SnapshotBucketSource

__all__ = ['JsonSnapshotSource', 'TrackerDataSource', 'EntryBucketSource', 'SnapshotBucketSource']
