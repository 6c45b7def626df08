"""Fetching tokenizer files from the Hugging Face Hub."""

import logging
from pathlib import Path

from huggingface_hub import snapshot_download

from .config import TokenizerConfig
from .errors import ModelLoadError

DEFAULT_REPO = "openai/clip-vit-base-patch32"

log = logging.getLogger(__name__)


def download_model(
    repo_id: str = DEFAULT_REPO,
    save_path: str | Path = "models",
    revision: str | None = None,
    config: TokenizerConfig | None = None,
) -> Path:
    """
    Download the vocabulary and merges files of a model repository.

    Only the two tokenizer files are fetched, not the model weights.

    :param repo_id: Hub repository id, e.g. ``"openai/clip-vit-base-patch32"``.
    :param save_path: Directory the files are written into.
    :param revision: Optional branch, tag or commit.
    :returns: Directory holding the downloaded files, ready for
        :meth:`ClipTokenizer.from_pretrained`.
    :raises ModelLoadError: If the download did not produce both files.
    """
    config = config if config is not None else TokenizerConfig.from_env()
    save_path = Path(save_path)
    save_path.mkdir(parents=True, exist_ok=True)

    log.info(f"downloading tokenizer files from {repo_id} to {save_path}")
    local_dir = Path(
        snapshot_download(
            repo_id=repo_id,
            revision=revision,
            local_dir=save_path,
            allow_patterns=[config.vocab_filename, config.merges_filename],
        )
    )

    for name in (config.vocab_filename, config.merges_filename):
        if not (local_dir / name).is_file():
            raise ModelLoadError(
                f"{name} not found in repository {repo_id}", model_path=str(local_dir)
            )

    log.info("download complete")
    return local_dir


__all__ = ["DEFAULT_REPO", "download_model"]
