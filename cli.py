#!/usr/bin/env python3
"""
qrng-range: uniformly distributed integers in [MINIMUM, MAXIMUM] from a
quantum entropy source.

    qrng-range [-b BASE] [MINIMUM] MAXIMUM AMOUNT

Numbers may be decimal or 0x-prefixed hex. Samples are printed one per line
in BASE (2..16, default 10) as soon as each source call returns.

Exit codes: 0 ok (AMOUNT 0 included), 1 bad arguments, 2 source failure;
on failure the number of samples not delivered goes to stderr.
"""
import argparse
import asyncio
import logging
import sys
from typing import Optional, Sequence, TextIO

import httpx

from rng.bigint import parse_literal
from rng.errors import ConversionError, InvalidRangeError, RangeTooLargeError, SourceFailureError
from services.render import render_lines
from services.scheduler import RangePlan, deliver, plan_range
from settings import settings
from sources.qrng import fetch_raw

EXIT_OK = 0
EXIT_USAGE = 1
EXIT_SOURCE = 2


class _Parser(argparse.ArgumentParser):
    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(EXIT_USAGE, f"{self.prog}: error: {message}\n")


def _base(text: str) -> int:
    try:
        b = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid base {text!r}")
    if not 2 <= b <= 16:
        raise argparse.ArgumentTypeError("base must be in 2..16")
    return b


def build_parser() -> argparse.ArgumentParser:
    parser = _Parser(prog="qrng-range",
                     description="Uniform random integers in [MINIMUM, MAXIMUM] from a quantum source")
    parser.add_argument("-b", "--base", type=_base, default=10, help="output base, 2..16 (default 10)")
    parser.add_argument("numbers", nargs="+", metavar="NUMBER",
                        help="[MINIMUM] MAXIMUM AMOUNT, MINIMUM defaults to 0")
    parser.add_argument("-v", "--verbose", action="store_true", help="log every source call")
    return parser


async def _run(plan: RangePlan, amount: int, base: int, out: TextIO) -> None:
    async with httpx.AsyncClient(timeout=settings.QRNG_TIMEOUT) as cli:
        async def fetch(length, profile):
            return await fetch_raw(length, profile, client=cli)

        async for batch in deliver(plan, amount, fetch):
            out.writelines(render_lines(batch, base))
            out.flush()


def main(argv: Optional[Sequence[str]] = None, out: Optional[TextIO] = None, err: Optional[TextIO] = None) -> int:
    out = out or sys.stdout
    err = err or sys.stderr
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.LOG_LEVEL,
        format="%(asctime)s [%(name)s] %(levelname)s %(message)s",
        datefmt="%H:%M:%S",
        stream=err,
    )

    if len(args.numbers) not in (2, 3):
        print("qrng-range: expected [MINIMUM] MAXIMUM AMOUNT", file=err)
        return EXIT_USAGE
    try:
        nums = [parse_literal(x) for x in args.numbers]
    except ConversionError as e:
        print(f"qrng-range: {e}", file=err)
        return EXIT_USAGE
    if len(nums) == 2:
        nums.insert(0, 0)
    minimum, maximum, amount = nums

    try:
        plan = plan_range(minimum, maximum)
    except (InvalidRangeError, RangeTooLargeError) as e:
        print(f"qrng-range: {e}", file=err)
        return EXIT_USAGE
    if amount == 0:
        return EXIT_OK

    try:
        asyncio.run(_run(plan, amount, args.base, out))
    except SourceFailureError as e:
        print(f"qrng-range: {e}", file=err)
        return EXIT_SOURCE
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
