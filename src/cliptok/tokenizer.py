"""CLIP text tokenizer: pre-tokenization, BPE merging and id lookup."""

from concurrent.futures import ThreadPoolExecutor
import logging
from math import ceil
import os
from pathlib import Path

import regex as re

from ._bpe import BPEMergeEngine, MergeCache
from ._decorators import measure_time
from .config import TokenizerConfig
from .errors import (
    ModelLoadError,
    TokenizationError,
    UnknownTokenError,
    VocabularyError,
)
from .loader import load_merges, load_vocab
from .parallel import ParallelMode, ParallelStrategy
from .pattern import build_pattern, compile_pattern, pre_tokenize
from .types import MergeRanks, Subword, Token, Vocabulary

log = logging.getLogger(__name__)


class ClipTokenizer:
    """
    Converts text into the id sequence consumed by a CLIP text encoder.

    The vocabulary and merge ranks are treated as read-only after
    construction and may be shared between instances. The merge cache is
    owned by the instance; it only grows and is safe to use from several
    threads at once.

    Example:
       >>> tok = ClipTokenizer.from_pretrained("models/clip-vit-base-patch16")
       >>> tok.tokenize("a photo of a cat")
       [49406, 320, 1125, 539, 320, 2368, 49407]
    """

    def __init__(
        self,
        vocab: Vocabulary,
        merge_ranks: MergeRanks,
        config: TokenizerConfig | None = None,
    ) -> None:
        """
        Build a tokenizer from already loaded tables.

        :raises ModelLoadError: If the vocabulary lacks the BOS or EOS entry.
        """
        self.config = config if config is not None else TokenizerConfig()
        missing = [seq for seq in (self.config.bos, self.config.eos) if seq not in vocab]
        if missing:
            raise ModelLoadError(f"vocabulary is missing special tokens: {missing}")

        self.vocab = vocab
        self.merge_ranks = merge_ranks
        self.bos_token: Token = vocab[self.config.bos]
        self.eos_token: Token = vocab[self.config.eos]
        self.cache = MergeCache()
        self.engine = BPEMergeEngine(
            merge_ranks, cache=self.cache, end_of_word=self.config.end_of_word
        )
        self.compiled_pat: re.Pattern = compile_pattern(
            build_pattern((self.config.bos, self.config.eos))
        )
        # id -> subword, only needed for decoding
        self._inverted_vocab: dict[Token, Subword] | None = None

    @classmethod
    @measure_time
    def from_files(
        cls,
        vocab_path: str | Path,
        merges_path: str | Path,
        config: TokenizerConfig | None = None,
    ) -> "ClipTokenizer":
        """
        Load a tokenizer from a vocabulary JSON file and a merges text file.

        :raises ModelLoadError: If either file is missing or malformed, or the
            vocabulary lacks BOS or EOS.
        """
        merge_ranks = load_merges(merges_path)
        vocab = load_vocab(vocab_path)
        tokenizer = cls(vocab, merge_ranks, config=config)
        log.info(
            f"tokenizer loaded: {len(vocab)} vocabulary entries, {len(merge_ranks)} merge rules"
        )
        return tokenizer

    @classmethod
    def from_pretrained(
        cls, model_dir: str | Path, config: TokenizerConfig | None = None
    ) -> "ClipTokenizer":
        """
        Load a tokenizer from a model directory holding ``vocab.json`` and
        ``merges.txt`` (file names come from ``config``).
        """
        config = config if config is not None else TokenizerConfig.from_env()
        model_dir = Path(model_dir)
        if not model_dir.is_dir():
            raise ModelLoadError("model directory does not exist", model_path=str(model_dir))
        return cls.from_files(
            model_dir / config.vocab_filename,
            model_dir / config.merges_filename,
            config=config,
        )

    def vocab_size(self) -> int:
        """Return the number of entries in the vocabulary."""
        return len(self.vocab)

    def tokenize(
        self, text: str, prepend_bos: bool = True, append_eos: bool = True
    ) -> list[Token]:
        """
        Tokenize ``text`` into vocabulary ids.

        :param text: Raw input text.
        :param prepend_bos: Put the BOS id in front of the result.
        :param append_eos: Put the EOS id at the end of the result.
        :returns: Ordered token ids.
        :raises UnknownTokenError: If a merged subword has no vocabulary entry.
        """
        subwords: list[Subword] = []
        for pretoken in pre_tokenize(text, self.compiled_pat):
            subwords.extend(self.engine.merge(pretoken))

        ids: list[Token] = []
        if prepend_bos:
            ids.append(self.bos_token)
        for pos, subword in enumerate(subwords):
            tok = self.vocab.get(subword)
            if tok is None:
                raise UnknownTokenError(
                    "subword not found in vocabulary", subword=subword, position=pos
                )
            ids.append(tok)
        if append_eos:
            ids.append(self.eos_token)

        return ids

    def tokenize_batch(
        self,
        texts: list[str],
        prepend_bos: bool = True,
        append_eos: bool = True,
        num_workers: int | None = None,
        parallel_mode: ParallelStrategy | ParallelMode = "auto",
    ) -> list[list[Token]]:
        """
        Tokenize many texts, optionally across worker threads.

        ``off`` tokenizes serially, ``batch`` spreads groups of texts over a
        thread pool, ``auto`` picks ``batch`` only when there is more than
        one text and more than one worker. All workers share this
        instance's merge cache.

        :returns: Token id sequences in input order.
        """
        mode = ParallelMode.get(parallel_mode)

        if num_workers is None:
            workers = os.cpu_count() or 1
        else:
            workers = max(1, num_workers)  # "0" interpreted as 1 worker

        def encode_group(group: list[str]) -> list[list[Token]]:
            return [self.tokenize(text, prepend_bos, append_eos) for text in group]

        def process_batch() -> list[list[Token]]:
            """Tokenize grouped texts in parallel."""
            # group texts to reduce task-scheduling overhead
            target_tasks = min(len(texts), workers * 2)
            group_size = max(1, ceil(len(texts) / target_tasks))
            text_groups = [
                texts[idx : idx + group_size] for idx in range(0, len(texts), group_size)
            ]
            with ThreadPoolExecutor(max_workers=workers) as pool:
                encoded_groups = list(pool.map(encode_group, text_groups))
            return [encoded for group in encoded_groups for encoded in group]

        if not texts:
            return []

        match mode:
            case ParallelMode.OFF:
                return encode_group(texts)
            case ParallelMode.BATCH:
                return process_batch()
            case ParallelMode.AUTO:
                if len(texts) == 1 or workers == 1:
                    return encode_group(texts)
                return process_batch()

    def pad(
        self,
        ids: list[Token],
        context_length: int | None = None,
        pad_id: Token = 0,
        truncate: bool = True,
    ) -> list[Token]:
        """
        Shape a token sequence to the fixed length the text encoder expects.

        Short sequences are right-padded with ``pad_id``. Long sequences are
        cut to ``context_length``; a sequence that ended with EOS still ends
        with EOS after the cut.

        :raises TokenizationError: If the target length is below 1, or the
            sequence is too long and ``truncate`` is ``False``.
        """
        length = context_length if context_length is not None else self.config.context_length
        if length < 1:
            raise TokenizationError(f"context length must be at least 1, got {length}")

        if len(ids) <= length:
            return ids + [pad_id] * (length - len(ids))

        if not truncate:
            raise TokenizationError(
                f"sequence longer than context length {length}", length=len(ids)
            )

        log.debug(f"truncating sequence of {len(ids)} tokens to {length}")
        cut = ids[:length]
        if ids[-1] == self.eos_token:
            cut[-1] = self.eos_token
        return cut

    def decode(self, tokens: list[Token], skip_special_tokens: bool = True) -> str:
        """
        Turn ids back into normalized text.

        Word-final markers become spaces, so the result is the lowercased,
        whitespace-collapsed input rather than the original text.

        :raises VocabularyError: If any id is not in the vocabulary.
        """
        if self._inverted_vocab is None:
            self._inverted_vocab = {tok: seq for seq, tok in self.vocab.items()}

        special = {self.bos_token, self.eos_token}
        subwords = []
        for tok in tokens:
            if skip_special_tokens and tok in special:
                continue
            if tok not in self._inverted_vocab:
                raise VocabularyError("token not found in vocabulary", invalid_tok=tok)
            subwords.append(self._inverted_vocab[tok])

        text = "".join(subwords).replace(self.config.end_of_word, " ")
        return text.strip()


__all__ = ["ClipTokenizer"]
