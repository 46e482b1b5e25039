"""
Ingestion package for the vodsync worker.

The ingestion side of a scheduler cycle consists of:

1. File discovery (file_matcher.py):
   - Scans the download folder for .mp4 files
   - Extracts (title, episode label) from file names

2. Upload (upload.py):
   - Creates the remote title folder when missing
   - Uploads new episodes, re-uploads ones whose remote length differs

3. Catalog records (catalog_writer.py):
   - Creates catalog / episode rows and queues follow-up work

4. Quality reconciliation (reconcile.py):
   - Pulls thumbnail and quality tier links into episode rows
"""

from .file_matcher import (
    LocalFileCandidate,
    compile_pattern,
    discover_candidates,
    match_file_name,
    parse_episode_number,
)
from .catalog_writer import CatalogWriter
from .upload import UploadOrchestrator
from .reconcile import QualityReconciler, apply_remote_stat, is_quality_complete

__all__ = [
    "LocalFileCandidate",
    "compile_pattern",
    "discover_candidates",
    "match_file_name",
    "parse_episode_number",
    "CatalogWriter",
    "UploadOrchestrator",
    "QualityReconciler",
    "apply_remote_stat",
    "is_quality_complete",
]
