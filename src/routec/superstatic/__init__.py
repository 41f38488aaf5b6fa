"""routec.superstatic — superstatic-style routing rules.

Converts redirects, rewrites, headers, clean-URL and trailing-slash
settings into low-level route descriptors, and whole routing configs into
a validated route table.
"""

from routec.superstatic._convert import (
    CleanUrl,
    convert_clean_urls,
    convert_headers,
    convert_redirects,
    convert_rewrites,
    convert_trailing_slash,
    get_clean_urls,
)
from routec.superstatic._transform import get_transformed_routes

__all__ = [
    # Assemblers
    "convert_redirects",
    "convert_rewrites",
    "convert_headers",
    "convert_clean_urls",
    "convert_trailing_slash",
    # Clean URL tables
    "CleanUrl",
    "get_clean_urls",
    # Whole config
    "get_transformed_routes",
]
