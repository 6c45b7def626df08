"""Command line interface for tokenizing text and fetching tokenizer files."""

import argparse
import json
import logging

from .errors import ClipTokError
from .hub import DEFAULT_REPO, download_model
from .tokenizer import ClipTokenizer

log = logging.getLogger(__name__)


def _tokenize(args: argparse.Namespace) -> None:
    tokenizer = ClipTokenizer.from_pretrained(args.model_path)
    for text in args.text:
        ids = tokenizer.tokenize(
            text, prepend_bos=not args.no_bos, append_eos=not args.no_eos
        )
        if args.pad:
            ids = tokenizer.pad(ids)
        print(json.dumps(ids))


def _download(args: argparse.Namespace) -> None:
    path = download_model(args.repo, args.save_path, revision=args.revision)
    print(path)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cliptok", description="CLIP text tokenizer."
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging."
    )
    sub = parser.add_subparsers(dest="command", required=True)

    tok = sub.add_parser("tokenize", help="Print token ids for each text.")
    tok.add_argument(
        "--model-path",
        required=True,
        help="Directory holding vocab.json and merges.txt.",
    )
    tok.add_argument("--no-bos", action="store_true", help="Do not prepend BOS.")
    tok.add_argument("--no-eos", action="store_true", help="Do not append EOS.")
    tok.add_argument(
        "--pad", action="store_true", help="Pad or truncate to the context length."
    )
    tok.add_argument("text", nargs="+", help="Text to tokenize.")
    tok.set_defaults(func=_tokenize)

    dl = sub.add_parser("download-model", help="Download tokenizer files from the Hub.")
    dl.add_argument("--repo", default=DEFAULT_REPO, help="Hub repository id.")
    dl.add_argument("--save-path", default="models", help="Output directory.")
    dl.add_argument("--revision", default=None, help="Branch, tag or commit.")
    dl.set_defaults(func=_download)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
    )

    try:
        args.func(args)
    except ClipTokError as e:
        log.error(str(e))
        return 1
    return 0
