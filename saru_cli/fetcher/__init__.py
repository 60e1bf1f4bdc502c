"""saru fetcher module.

Gets the saruCanvas framework scripts from a remote mirror.

Key classes:
    SourceFetcher - mirror lookup, clone, selective relocation
    StagingArea   - temporary clone directory with guaranteed removal
"""

from .source import SourceFetcher, probe_mirror, relocate_scripts
from .staging import StagingArea

__all__ = [
    "SourceFetcher",
    "StagingArea",
    "probe_mirror",
    "relocate_scripts",
]
