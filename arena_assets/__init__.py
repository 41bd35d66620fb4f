"""
arena_assets: decoders for The Elder Scrolls: Arena data files

Reads the game's text and binary tables from loose files or GLOBAL.BSA and
exposes them as one immutable asset table.
"""

__version__ = "0.1.0"
__author__ = "arena_assets Contributors"

from .archive import Archive, BsaArchive, DirectoryArchive, MemoryArchive, open_archive
from .errors import (
    AssetError,
    AssetTableStateError,
    IndexOutOfRange,
    KeyNotFound,
    MalformedRecord,
    ResourceNotFound,
    UnrecognizedCategoryCode,
    UnrecognizedRule,
)
from .game_data import (
    AssetTable,
    AssetTableLoader,
    ExecutableSideData,
    get_assets,
    init_assets,
    load_asset_table,
)
from .utils.logging_config import setup_logging

__all__ = [
    # Archive
    'Archive',
    'BsaArchive',
    'DirectoryArchive',
    'MemoryArchive',
    'open_archive',
    # Asset table
    'AssetTable',
    'AssetTableLoader',
    'ExecutableSideData',
    'load_asset_table',
    'init_assets',
    'get_assets',
    # Errors
    'AssetError',
    'AssetTableStateError',
    'IndexOutOfRange',
    'KeyNotFound',
    'MalformedRecord',
    'ResourceNotFound',
    'UnrecognizedCategoryCode',
    'UnrecognizedRule',
    # Logging
    'setup_logging',
]
