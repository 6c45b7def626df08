"""cliptok: CLIP text tokenization library."""

from ._bpe import BPEMergeEngine, MergeCache
from .config import TokenizerConfig
from .errors import (
    ClipTokError,
    ModelLoadError,
    PatternError,
    StrategyError,
    TokenizationError,
    UnknownTokenError,
    VocabularyError,
)
from .hub import download_model
from .loader import load_merges, load_vocab
from .parallel import ParallelMode, list_parallel_modes
from .pattern import normalize, pre_tokenize
from .tokenizer import ClipTokenizer

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("cliptok")
except PackageNotFoundError:
    __version__ = "dev"

__all__ = [
    "ClipTokenizer",
    "TokenizerConfig",
    "BPEMergeEngine",
    "MergeCache",
    "ParallelMode",
    "ClipTokError",
    "ModelLoadError",
    "PatternError",
    "StrategyError",
    "TokenizationError",
    "UnknownTokenError",
    "VocabularyError",
    "download_model",
    "load_merges",
    "load_vocab",
    "list_parallel_modes",
    "normalize",
    "pre_tokenize",
]
