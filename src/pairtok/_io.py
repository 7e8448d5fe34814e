"""
Reading and writing vocabulary (JSON) and merge-rule (text) files.
"""

import json
import logging
from pathlib import Path
from typing import Any, Final

from ._sanitise import render_text, unmark
from .errors import ModelLoadError, ModelSaveError
from .types import MergePair, MergeRanks, Token

log = logging.getLogger(__name__)

JSON_INDENT: Final[int] = 4
COMMENT_PREFIX: Final[str] = "#"


def require_file(path: str | Path, kind: str) -> Path:
    """Return ``path`` as a Path, raising if it does not exist."""
    path = Path(path)
    if not path.exists():
        raise ModelLoadError(f"{kind} file not found", model_path=str(path))
    return path


def read_vocab(path: Path) -> dict[str, Token]:
    """
    Read a JSON object mapping token strings to non-negative integer ids.

    :raises ModelLoadError: If the file is unreadable, not valid JSON, not an
                            object, or maps a token to anything but an id.
    """
    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ModelLoadError(
            f"invalid JSON in vocabulary file: {e.msg}", model_path=str(path), line=e.lineno
        ) from e
    except (OSError, UnicodeDecodeError) as e:
        raise ModelLoadError(
            "failed to read vocabulary file", model_path=str(path)
        ) from e

    if not isinstance(data, dict):
        raise ModelLoadError(
            f"vocabulary must be a JSON object, got {type(data).__name__}",
            model_path=str(path),
        )

    for token, tok_id in data.items():
        # bool is an int subclass but never a valid id
        if isinstance(tok_id, bool) or not isinstance(tok_id, int) or tok_id < 0:
            raise ModelLoadError(
                f"token {render_text(token)!r} has invalid id {tok_id!r}",
                model_path=str(path),
            )

    log.debug(f"read {len(data)} vocabulary entries from {path}")
    return data


def read_merges(path: Path) -> tuple[list[MergePair], MergeRanks]:
    """
    Parse a merge-rule file into the ordered pair list and its rank table.

    One rule per line as two whitespace separated fields. Blank lines and
    ``#`` comment lines are skipped, as are lines without exactly two fields;
    skipped lines do not consume a rank. Word-boundary markers become spaces.
    Ranks are keyed by the concatenated pair; the first rule wins a key.

    :raises ModelLoadError: If the file cannot be read as UTF-8 text.
    """
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ModelLoadError("failed to read merges file", model_path=str(path)) from e

    merges: list[MergePair] = []
    ranks: MergeRanks = {}
    n_skipped = 0

    for lineno, line in enumerate(content.split("\n"), start=1):
        line = line.strip()
        if not line or line.startswith(COMMENT_PREFIX):
            continue

        fields = line.split()
        if len(fields) != 2:
            log.debug(f"skipping malformed merge rule at line {lineno}: {render_text(line)}")
            n_skipped += 1
            continue

        first, second = unmark(fields[0]), unmark(fields[1])
        ranks.setdefault(first + second, len(merges))
        merges.append((first, second))

    if n_skipped:
        log.debug(f"skipped {n_skipped} malformed merge rules in {path}")
    log.debug(f"read {len(merges)} merge rules from {path}")
    return merges, ranks


def write_json(path: str | Path, obj: Any) -> None:
    """
    Serialize ``obj`` as pretty-printed UTF-8 JSON.

    :raises ModelSaveError: If the file cannot be written.
    """
    path = Path(path)
    log.debug(f"writing {path}")
    try:
        with path.open("w", encoding="utf-8", newline="\n") as f:
            json.dump(obj, f, ensure_ascii=False, indent=JSON_INDENT)
    except (OSError, UnicodeEncodeError) as e:
        raise ModelSaveError("failed to write file", model_path=str(path)) from e
