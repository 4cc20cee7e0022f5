"""Local buffer files: bookmark sidecar, file-set discovery and line reading."""

from .bookmark import Bookmark, BookmarkFile, open_bookmark, peek_bookmark
from .fileset import list_buffer_files
from .reader import LineReader
from .status import backlog_summary

__all__ = [
    "Bookmark",
    "BookmarkFile",
    "open_bookmark",
    "peek_bookmark",
    "list_buffer_files",
    "LineReader",
    "backlog_summary",
]
