"""List the members of an importable object.

    python -m memberprobe.cli collections.OrderedDict --prefix move --wide
"""

import argparse
import importlib
import json
import sys
from typing import List, Optional

from memberprobe.core.collector import collect, collect_wide
from memberprobe.core.matchers import includes, prefix, regex, suffix
from memberprobe.presets import MATCHER_PACKS, get_matcher_pack


def resolve(path: str):
    """Import the longest module prefix of ``path`` and walk the rest.

    >>> resolve("json.dumps").__name__
    'dumps'
    """
    names = path.split(".")
    obj = None
    for i in range(len(names), 0, -1):
        try:
            obj = importlib.import_module(".".join(names[:i]))
        except ImportError:
            continue
        names = names[i:]
        break
    else:
        raise ImportError(f"No module found for {path}")

    for name in names:
        if not hasattr(obj, name):
            raise ValueError(f"{name} not found in {obj}.")
        obj = getattr(obj, name)
    return obj


def _strip(pattern_kind):
    def transform(key, value, pattern):
        if pattern_kind == "prefix":
            return key[len(pattern):]
        return key[: len(key) - len(pattern)]

    return transform


def build_rules(args) -> list:
    rules = []
    for p in args.prefix:
        rules.append(prefix(p, _strip("prefix") if args.strip else None))
    for s in args.suffix:
        rules.append(suffix(s, _strip("suffix") if args.strip else None))
    for i in args.includes:
        rules.append(includes(i))
    for r in args.regex:
        rules.append(regex(r))
    for name in args.pack:
        rules.extend(get_matcher_pack(name))
    if not rules:
        rules.append(includes(""))
    return rules


def parse_args(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(
        prog="memberprobe",
        description="Collect member names of an importable object.",
    )
    parser.add_argument("path", help="Dotted path, e.g. collections.OrderedDict.")
    parser.add_argument("--prefix", action="append", default=[], help="Keep names starting with PREFIX.")
    parser.add_argument("--suffix", action="append", default=[], help="Keep names ending with SUFFIX.")
    parser.add_argument("--includes", action="append", default=[], help="Keep names containing TEXT.")
    parser.add_argument("--regex", action="append", default=[], help="Keep names matching REGEX.")
    parser.add_argument(
        "--pack",
        action="append",
        default=[],
        choices=sorted(MATCHER_PACKS),
        help="Add the rules of a preset pack.",
    )
    parser.add_argument("--strip", action="store_true", help="Drop the matched prefix/suffix from output.")
    parser.add_argument("--wide", action="store_true", help="Scan the object's type, MRO and aliases too.")
    parser.add_argument("--expand", action="append", default=[], help="Also scan this member (with --wide).")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    try:
        obj = resolve(args.path)
    except (ImportError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    rules = build_rules(args)
    if args.wide:
        names = collect_wide(root=obj, rules=rules, expand_children=args.expand)
    else:
        names = collect(source=obj, rules=rules)

    print(json.dumps(sorted(names), indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
