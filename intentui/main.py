from __future__ import annotations
import argparse
import sys
from typing import List, Optional, Tuple

from intentui.config import ConfigError, load_config
from intentui.core.classifier import classify
from intentui.core.types import UserConfidenceProfile

DEMO_CASES: List[Tuple[str, str]] = [
    ("Add 500 dollars for food", "confident action"),
    ("I think I spent around 50 maybe", "uncertainty"),
    ("Why am I broke", "reflective"),
    ("Delete it now!", "urgent action"),
    ("Show my spending chart", "analytical"),
]


def _print_result(text: str, res, out) -> None:
    out.write(f'Input: "{text}"\n')
    out.write(f"  intent:     {res.intent.value}\n")
    out.write(f"  confidence: {res.confidence:.2f}\n")
    out.write(f"  urgency:    {res.urgency.value}\n")
    out.write(f"  density:    {res.density.value}\n")
    out.write(f"  reason:     {res.reasoning}\n")


def main(argv: Optional[List[str]] = None, out=None) -> int:
    out = out or sys.stdout
    ap = argparse.ArgumentParser(prog="intentui")
    ap.add_argument("--signals", default=None, help="JSON file overriding the keyword sets")
    sub = ap.add_subparsers(dest="cmd", required=True)

    ex = sub.add_parser("explain", help="classify one utterance")
    ex.add_argument("text")
    ex.add_argument("--hesitations", type=int, default=0)
    ex.add_argument("--intent-changed", action="store_true")

    sub.add_parser("demo", help="run the built-in scenario table")
    args = ap.parse_args(argv)

    try:
        cfg = load_config(signals_path=args.signals)
    except ConfigError as e:
        sys.stderr.write(f"intentui: {e}\n")
        return 2

    if args.cmd == "explain":
        profile = UserConfidenceProfile(hesitations=args.hesitations, intent_changed=args.intent_changed)
        _print_result(args.text, classify(args.text, profile, cfg), out)
        return 0

    for text, desc in DEMO_CASES:
        out.write(f"[{desc}]\n")
        _print_result(text, classify(text, UserConfidenceProfile(), cfg), out)
        out.write("-" * 40 + "\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
