"""
Loading of the vocabulary and merge rank files a tokenizer is built from.

``vocab.json`` is a JSON object mapping subword strings to integer ids.
``merges.txt`` starts with a header line, followed by one ``left right`` pair
per line; a pair's rank is its 0-based index after the header.
"""

from collections.abc import Iterable
import json
import logging
from pathlib import Path

from .errors import ModelLoadError
from .types import MergeRanks, SubwordPair, Vocabulary

log = logging.getLogger(__name__)


def load_vocab(path: str | Path) -> Vocabulary:
    """
    Read and validate a ``subword -> id`` vocabulary file.

    :param path: Path to the JSON vocabulary file.
    :returns: The vocabulary mapping.
    :raises ModelLoadError: If the file is missing or unreadable, is not valid
        JSON, is not an object of non-negative integer ids, or reuses an id.
    """
    path = Path(path)

    if not path.is_file():
        raise ModelLoadError("vocabulary file does not exist", model_path=str(path))

    log.debug(f"loading vocabulary from {path}")

    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, UnicodeDecodeError) as e:
        raise ModelLoadError(
            f"failed to read vocabulary: {e}", model_path=str(path)
        ) from e
    except json.JSONDecodeError as e:
        raise ModelLoadError(
            f"invalid vocabulary json: {e.msg}", model_path=str(path), line_no=e.lineno
        ) from e

    if not isinstance(data, dict):
        raise ModelLoadError(
            f"vocabulary must be a json object, got {type(data).__name__}",
            model_path=str(path),
        )

    vocab: Vocabulary = {}
    # id -> subword, to detect two subwords sharing an id
    seen: dict[int, str] = {}
    for subword, tok in data.items():
        # bool is an int subclass but never a valid id
        if not isinstance(tok, int) or isinstance(tok, bool) or tok < 0:
            raise ModelLoadError(
                f"invalid id for {subword!r}: {tok!r}", model_path=str(path)
            )
        if tok in seen:
            raise ModelLoadError(
                f"id {tok} assigned to both {seen[tok]!r} and {subword!r}",
                model_path=str(path),
            )
        seen[tok] = subword
        vocab[subword] = tok

    if vocab and max(seen) != len(vocab) - 1:
        log.warning(
            f"vocabulary ids are not dense: {len(vocab)} entries, max id {max(seen)}"
        )

    log.debug(f"loaded {len(vocab)} vocabulary entries")
    return vocab


def parse_merges(lines: Iterable[str], source: str | None = None) -> MergeRanks:
    """
    Build a pair -> rank table from the lines of a merges file.

    The first non-empty line is a header and is skipped. Empty lines are
    ignored and do not consume a rank; a line of only spaces is not empty and
    fails the two-field check. When a pair occurs more than once the first
    occurrence keeps its rank and later ones are logged and dropped.

    :param lines: Lines of the merges file, header included.
    :param source: File name used in error messages.
    :raises ModelLoadError: If there is no header or a line does not hold
        exactly two fields.
    """
    ranks: MergeRanks = {}
    rank = 0
    header_seen = False
    for line_no, line in enumerate(lines, start=1):
        if not line.strip("\r\n"):
            continue
        if not header_seen:
            header_seen = True
            continue
        fields = line.split()
        if len(fields) != 2:
            raise ModelLoadError(
                f"merge line must hold exactly two fields, got {len(fields)}",
                model_path=source,
                line_no=line_no,
            )
        pair: SubwordPair = (fields[0], fields[1])
        if pair in ranks:
            log.warning(
                f"duplicate merge {pair} at line {line_no} ignored, keeping rank {ranks[pair]}"
            )
        else:
            ranks[pair] = rank
        rank += 1

    if not header_seen:
        raise ModelLoadError("merges file is empty, expected a header line", model_path=source)

    return ranks


def load_merges(path: str | Path) -> MergeRanks:
    """
    Read a merges file into a pair -> rank table.

    :param path: Path to the merges text file.
    :raises ModelLoadError: If the file is missing, unreadable or malformed.
    """
    path = Path(path)

    if not path.is_file():
        raise ModelLoadError("merges file does not exist", model_path=str(path))

    log.debug(f"loading merges from {path}")

    try:
        with path.open("r", encoding="utf-8") as f:
            ranks = parse_merges(f, source=str(path))
    except (OSError, UnicodeDecodeError) as e:
        raise ModelLoadError(f"failed to read merges: {e}", model_path=str(path)) from e

    log.debug(f"loaded {len(ranks)} merge rules")
    return ranks


__all__ = ["load_vocab", "load_merges", "parse_merges"]
