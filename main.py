import argparse
import sys

from typing import List, Optional
from bitvec import BitArray, LengthMismatch

GROUP_SIZE = 8  #: Bits per group in binary listings
OPERATIONS = ("and", "or", "xor", "nand")  #: Binary operations for ``combine``


def get_parser():
    """Create and configure the CLI argument parser.

    :returns: Configured argument parser.
    :rtype: argparse.ArgumentParser
    """
    parser = argparse.ArgumentParser(
        description="Inspect and combine packed bit arrays"
    )
    subparsers = parser.add_subparsers(
        title="subcommands", dest="cmd", required=True
    )

    info = subparsers.add_parser(
        "info", aliases=["i"], help="Show length, counts and packed bytes"
    )
    info.add_argument("bits", help="Bit string, e.g. 1011_0010")
    info.add_argument(
        "-g",
        "--group",
        type=int,
        default=GROUP_SIZE,
        help=f"Bits per group in the binary listing (default: {GROUP_SIZE})",
    )

    combine = subparsers.add_parser(
        "combine", aliases=["c"], help="Combine two equal-length bit strings"
    )
    combine.add_argument("op", choices=OPERATIONS, help="Bitwise operation")
    combine.add_argument("left", help="Left operand bit string")
    combine.add_argument("right", help="Right operand bit string")

    invert = subparsers.add_parser(
        "not", aliases=["n"], help="Complement a bit string"
    )
    invert.add_argument("bits", help="Bit string to complement")

    unpack = subparsers.add_parser(
        "unpack", aliases=["u"], help="Expand hex bytes (MSB-first) to bits"
    )
    unpack.add_argument("hex", help="Packed bytes as hex, e.g. b0a0")
    unpack.add_argument(
        "-l",
        "--length",
        type=int,
        default=None,
        help="Logical length in bits (default: all bits of the input)",
    )

    return parser


def _parse_bits(text: str) -> BitArray:
    """Parse a command-line bit string.

    :param text: String of ``0``/``1`` with optional ``_`` separators.
    :type text: str
    :returns: Parsed array.
    :rtype: BitArray
    :raises ValueError: On characters other than bits and separators.
    """
    return BitArray.from_string(text)


def _fmt_hex(bits: BitArray) -> str:
    """Format the packed storage as space-separated hex bytes.

    :param bits: Array to format.
    :type bits: BitArray
    :returns: E.g. ``"b0 a0"``; ``"-"`` for an empty array.
    :rtype: str
    """
    data = bits.as_bytes()
    if not data:
        return "-"
    return " ".join(f"{b:02x}" for b in data)


def describe(bits: BitArray, group: int = GROUP_SIZE) -> List[str]:
    """Build the report lines printed by ``info``.

    :param bits: Array to describe.
    :type bits: BitArray
    :param group: Bits per group in the binary line.
    :type group: int
    :returns: Report lines.
    :rtype: List[str]
    """
    return [
        f"Length: {len(bits)} bits ({bits.byte_len()} bytes)",
        f"Ones: {bits.count_ones()}",
        f"Zeros: {bits.count_zeros()}",
        f"Binary: {bits.as_binary(group) or '-'}",
        f"Hex: {_fmt_hex(bits)}",
    ]


def show_info(text: str, group: int = GROUP_SIZE) -> int:
    """Print a summary of a bit string.

    :param text: Bit string.
    :type text: str
    :param group: Bits per group in the binary listing.
    :type group: int
    :returns: Exit status.
    :rtype: int
    """
    try:
        bits = _parse_bits(text)
        lines = describe(bits, group)
    except ValueError as e:
        print(f"[!] {e}")
        return 1
    for line in lines:
        print(line)
    return 0


def combine(op: str, left: str, right: str) -> int:
    """Print the result of a bitwise operation on two bit strings.

    :param op: One of :data:`OPERATIONS`.
    :type op: str
    :param left: Left operand.
    :type left: str
    :param right: Right operand.
    :type right: str
    :returns: Exit status; ``1`` on bad input or unequal lengths.
    :rtype: int
    """
    try:
        a = _parse_bits(left)
        b = _parse_bits(right)
    except ValueError as e:
        print(f"[!] {e}")
        return 1
    ops = {"and": a.and_, "or": a.or_, "xor": a.xor, "nand": a.nand}
    try:
        result = ops[op](b)
    except LengthMismatch:
        print(
            "[!] Operands must have the same length: "
            f"{len(a)} and {len(b)} bits"
        )
        return 1
    print(result.to_string())
    return 0


def invert(text: str) -> int:
    """Print the complement of a bit string.

    :returns: Exit status.
    :rtype: int
    """
    try:
        bits = _parse_bits(text)
    except ValueError as e:
        print(f"[!] {e}")
        return 1
    print((~bits).to_string())
    return 0


def unpack(hex_text: str, length: Optional[int] = None) -> int:
    """Print the bits packed in a hex byte string.

    :param hex_text: Hex digits, two per byte; spaces are ignored.
    :type hex_text: str
    :param length: Logical length in bits, or ``None`` for all bits.
    :type length: int | None
    :returns: Exit status.
    :rtype: int
    """
    try:
        data = bytes.fromhex(hex_text)
        bits = BitArray.from_bytes(data, length)
    except ValueError as e:
        print(f"[!] {e}")
        return 1
    print(bits.to_string())
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the CLI tool.

    :param argv: Arguments to parse instead of ``sys.argv[1:]``.
    :type argv: List[str] | None
    :returns: Exit status.
    :rtype: int
    """
    parser = get_parser()
    args = parser.parse_args(argv)

    if args.cmd in ["info", "i"]:
        return show_info(args.bits, args.group)
    if args.cmd in ["combine", "c"]:
        return combine(args.op, args.left, args.right)
    if args.cmd in ["not", "n"]:
        return invert(args.bits)
    if args.cmd in ["unpack", "u"]:
        return unpack(args.hex, args.length)
    return 1


if __name__ == "__main__":
    sys.exit(main())
