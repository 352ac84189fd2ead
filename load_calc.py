#!/usr/bin/env python3
"""Command line NEC Article 220 guided load calculator."""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence

# Allow imports when run from repo root
sys.path.append(str(Path(__file__).resolve().parent / "LoadCalcTools"))

from nec_loadcalc import __version__
from nec_loadcalc.evaluator import GuidedCalculation
from nec_loadcalc.scenarios import COMMERCIAL_SCENARIOS_BY_ID, HOUSE_SCENARIOS_BY_ID
from nec_loadcalc.steps import va
from nec_loadcalc.utils.pdf import simple_pdf_table

logger = logging.getLogger("load_calc")

CATALOGS = {
    "residential": HOUSE_SCENARIOS_BY_ID,
    "commercial": COMMERCIAL_SCENARIOS_BY_ID,
}


def _fmt(label: str, value: str, rule: Optional[str], show: bool) -> str:
    return f"{label}: {value}" + (f"  ({rule})" if show and rule else "")


def _row(label: str, value: str, rule: Optional[str], show: bool) -> tuple[str, str]:
    left = f"{label}: {value}"
    right = rule if show and rule else ""
    return left, right


def worked_solution(calc: GuidedCalculation, show_rules: bool, show_hints: bool) -> dict:
    """Lines and PDF rows for the fully solved calculation."""
    lines: List[str] = [f"{calc.scenario.name} ({calc.scenario.id})"]
    rows: List[tuple[str, str]] = [(calc.scenario.name, "")]
    for number, (step, answer, hint) in enumerate(calc.worked_rows(), start=1):
        label = f"{number}. {step.title}"
        lines.append(_fmt(label, va(answer), step.nec_reference, show_rules))
        rows.append(_row(label, va(answer), step.nec_reference, show_rules))
        if show_hints:
            for hint_line in hint.splitlines():
                if hint_line.strip():
                    lines.append(f"    {hint_line}")
                    rows.append((f"    {hint_line}", ""))
    return {"answers": calc.solve(), "lines": lines, "rows": rows}


def practice(calc: GuidedCalculation, ask: Callable[[str], str] = input, say: Callable[[str], None] = print) -> Dict[str, float]:
    """Prompt for every step, re-asking until the answer is acceptable.

    Closing input (Ctrl-D) or interrupting stops early with the answers so far.
    """
    answers: Dict[str, float] = {}
    for index, step in enumerate(calc.steps):
        say(f"\n{index + 1}/{len(calc)} {step.title}\n{step.prompt}")
        while True:
            try:
                reply = ask("> ").strip()
            except (EOFError, KeyboardInterrupt):
                say(f"\nStopped after {len(answers)} of {len(calc)} steps.")
                return answers
            if reply.lower() in {"?", "hint"}:
                say(calc.hint(index, answers))
                continue
            result = calc.submit(index, answers, reply)
            if result.accepted:
                answers[step.id] = result.stored
                say(f"Correct. Recorded {va(result.stored)}.")
                break
            logger.info("Rejected %r for %s", reply, step.id)
            say("Not quite. Type ? for a hint.")
    return answers


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="NEC Article 220 Guided Load Calculator")
    p.add_argument("--list", action="store_true", help="List the available scenarios and exit")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    p.add_argument("kind", nargs="?", choices=sorted(CATALOGS), help="Calculation type")
    p.add_argument("scenario", nargs="?", help="Scenario id")
    p.add_argument("--show-rules", action="store_true", help="Include NEC references")
    p.add_argument("--hints", action="store_true", help="Print the worked hint under each step")
    p.add_argument("--pdf", help="Path to export the worked solution as PDF")
    p.add_argument("--practice", action="store_true", help="Answer each step interactively")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return p


def main(argv: Optional[Sequence[str]] = None) -> int:
    p = build_parser()
    args = p.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING, format="%(levelname)s: %(message)s")

    if args.list:
        for kind, catalog in CATALOGS.items():
            print(f"{kind}:")
            for scenario in catalog.values():
                print(f"  {scenario.id:<12} {scenario.name}")
        return 0

    if not args.kind or not args.scenario:
        p.error("kind and scenario are required unless --list is given")
    catalog = CATALOGS[args.kind]
    if args.scenario not in catalog:
        p.error(f"unknown {args.kind} scenario {args.scenario!r} (choose from {', '.join(catalog)})")

    calc = GuidedCalculation(catalog[args.scenario])
    if args.practice:
        practice(calc)
        return 0

    result = worked_solution(calc, args.show_rules, args.hints)
    for line in result["lines"]:
        print(line)

    if args.pdf:
        simple_pdf_table(result["rows"], args.pdf)
        logger.info("Wrote %s", args.pdf)
    return 0


if __name__ == "__main__":
    sys.exit(main())
