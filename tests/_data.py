"""Reference vocabulary and merge list shared by the test suites."""

BOS_ID = 49406
EOS_ID = 49407

MERGES = [
    "#version: 0.2",
    "p h",
    "ph o",
    "pho t",
    "phot o</w>",
    "o f</w>",
    "c a",
    "ca t</w>",
    "' s</w>",
]


def reference_vocab() -> dict[str, int]:
    letters = "abcdefghijklmnopqrstuvwxyz"
    vocab = {ch: i for i, ch in enumerate(letters)}
    vocab.update({f"{ch}</w>": 100 + i for i, ch in enumerate(letters)})
    vocab.update({str(d): 200 + d for d in range(10)})
    vocab.update({f"{d}</w>": 210 + d for d in range(10)})
    vocab.update(
        {
            "!</w>": 230,
            ",</w>": 231,
            "'s</w>": 232,
            "'": 234,
            "ph": 1000,
            "pho": 1001,
            "phot": 1002,
            "ca": 1003,
            "photo</w>": 1125,
            "of</w>": 539,
            "cat</w>": 2368,
            "<|startoftext|>": BOS_ID,
            "<|endoftext|>": EOS_ID,
        }
    )
    # "a</w>" carries its id from the reference CLIP vocabulary
    vocab["a</w>"] = 320
    return vocab
