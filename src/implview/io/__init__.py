from __future__ import annotations

from .jsdata import (
    dump_implementors_js,
    iter_implementor_files,
    load_docs_tree,
    load_implementors_file,
    parse_implementors_js,
    trait_path_from_file,
)

__all__ = [
    "parse_implementors_js",
    "dump_implementors_js",
    "load_implementors_file",
    "load_docs_tree",
    "iter_implementor_files",
    "trait_path_from_file",
]
