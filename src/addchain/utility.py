# -----------------------------------------------------------------------------
#  Utility functions
# -----------------------------------------------------------------------------

from __future__ import annotations

import os
import re

_GROUPED_RE = re.compile(r"^[+]?\d{1,3}(?:[ ,_]\d{3})+$")


class UserInputError(Exception):
    pass


def parse_positive_int(text: str, label: str = "value") -> int:
    """
    Parse a user-typed positive integer.

    Accepts surrounding whitespace, a leading '+', and digit grouping with
    spaces, commas or underscores ("1 234 567", "1,234,567").
    Raises UserInputError for anything else or for values < 1.
    """
    s = (text or "").strip()
    if not s:
        raise UserInputError(f"Invalid input: {label} is empty.")
    if _GROUPED_RE.match(s):
        s = re.sub(r"[ ,_]", "", s)
    try:
        n = int(s, 10)
    except ValueError:
        raise UserInputError(f"Invalid input: {label} must be an integer, got '{text.strip()}'.") from None
    if n < 1:
        raise UserInputError(f"Invalid input: {label} must be at least 1, got {n}.")
    return n


def validate_output_setting(output_file: str | None) -> str | None:
    """
    Validate output setting.
    - None / "" => ok (screen only)
    - path/to/file => must not be a reserved name or a source/doc file
    Returns the output_file unchanged, or raises ValueError.
    """
    # lower case, compared against the lower-cased name
    FORBIDDEN_FILENAMES = {
        ".gitignore",
        "license",
        "pyproject.toml",
        # Windows reserved device names (case-insensitive on Windows)
        "con", "prn", "aux", "nul",
        "com1", "com2", "com3", "com4", "com5", "com6", "com7", "com8", "com9",
        "lpt1", "lpt2", "lpt3", "lpt4", "lpt5", "lpt6", "lpt7", "lpt8", "lpt9",
    }

    FORBIDDEN_EXTENSIONS = {".py", ".md", ".toml"}

    if not output_file:
        return output_file  # screen only

    if output_file.endswith(("/", "\\")):
        raise ValueError("Output must be a file, not a directory")

    basename = os.path.basename(output_file)
    name_no_ext, ext = os.path.splitext(basename)
    ext = ext.lower()

    if basename.lower() in FORBIDDEN_FILENAMES or name_no_ext.lower() in FORBIDDEN_FILENAMES:
        raise ValueError(f"Forbidden output filename: {basename}")

    if ext in FORBIDDEN_EXTENSIONS:
        raise ValueError(f"Forbidden output file extension: {ext}")

    return output_file


def typename(v: object) -> str:
    return type(v).__name__


def flatten_dotted(d: dict, prefix: str = "") -> dict[str, object]:
    out: dict[str, object] = {}
    for k, v in (d or {}).items():
        key = f"{prefix}.{k}" if prefix else str(k)
        if isinstance(v, dict):
            out.update(flatten_dotted(v, key))
        else:
            out[key] = v
    return out
