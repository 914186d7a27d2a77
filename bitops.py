from typing import Optional, Union

from bitvec import BitArray, OutOfBounds


class BitWriter:
    """Sequential writer packing multi-bit values into a :class:`BitArray`.

    :ivar bits: Array receiving the written bits.
    :type bits: BitArray
    """

    def __init__(self, target: Optional[BitArray] = None):
        """Create a writer appending to ``target`` (a new array if omitted).

        :param target: Array to append to.
        :type target: BitArray | None
        :returns: None
        :rtype: None
        """
        self.bits = target if target is not None else BitArray()

    def write_bit(self, value: bool):
        """Append a single bit."""
        self.bits.push(bool(value))

    def write_bits(self, value: int, nbits: int):
        """Write the lowest ``nbits`` of ``value``, MSB first.

        :param value: Integer whose bits will be written.
        :type value: int
        :param nbits: Number of bits from ``value`` to write.
        :type nbits: int
        :returns: None
        :rtype: None
        :raises ValueError: If ``nbits`` is negative.
        """
        if nbits < 0:
            raise ValueError(f"nbits must be non-negative, got {nbits}")
        for i in range(nbits - 1, -1, -1):
            self.bits.push((value >> i) & 1)

    def align(self):
        """Pad with zero bits up to the next byte boundary."""
        remainder = len(self.bits) & 7
        if remainder:
            self.bits.resize(len(self.bits) + 8 - remainder, False)

    def write_bytes(self, data: bytes):
        """Write raw bytes, aligning pending bits to the next byte boundary.

        :param data: Byte sequence to append.
        :type data: bytes
        :returns: None
        :rtype: None
        """
        self.align()
        for byte in data:
            self.bits.push_byte(byte)

    def flush(self) -> bytes:
        """Pad to a whole byte and return everything written so far.

        :returns: Packed bytes, MSB-first.
        :rtype: bytes
        """
        self.align()
        return self.bits.as_bytes()


class BitReader:
    """Sequential reader over a :class:`BitArray`.

    The read position belongs to the reader, so several readers can walk
    the same array independently.

    :ivar bits: Array being read.
    :type bits: BitArray
    :ivar pos: Index of the next bit to read.
    :type pos: int
    """

    def __init__(self, source: Union[BitArray, bytes, bytearray]):
        """Create a reader positioned at the first bit of ``source``.

        :param source: Array to read, or packed bytes (all bits significant).
        :type source: BitArray | bytes | bytearray
        :returns: None
        :rtype: None
        """
        if isinstance(source, BitArray):
            self.bits = source
        else:
            self.bits = BitArray.from_bytes(bytes(source))
        self.pos = 0

    @property
    def position(self) -> int:
        """Index of the next bit to read.

        :returns: Read position in bits.
        :rtype: int
        """
        return self.pos

    def remaining(self) -> int:
        """Number of bits left to read."""
        return len(self.bits) - self.pos

    def seek(self, pos: int):
        """Move the read position.

        :param pos: New position, ``0 <= pos <= len(bits)``.
        :type pos: int
        :returns: None
        :rtype: None
        :raises OutOfBounds: If ``pos`` is out of range.
        """
        if pos < 0 or pos > len(self.bits):
            raise OutOfBounds(
                f"read position {pos} out of range for length {len(self.bits)}"
            )
        self.pos = pos

    def reset(self):
        """Move the read position back to the first bit.

        :returns: None
        :rtype: None
        """
        self.pos = 0

    def read_bit(self) -> int:
        """Read one bit.

        :returns: ``0`` or ``1``.
        :rtype: int
        :raises EOFError: If no bits remain.
        """
        if self.pos >= len(self.bits):
            raise EOFError("Unexpected end of data")
        bit = int(self.bits.get(self.pos))
        self.pos += 1
        return bit

    def read_bits(self, nbits: int) -> int:
        """Read ``nbits`` bits and return them as an integer, MSB-first.

        :param nbits: Number of bits to read.
        :type nbits: int
        :returns: The integer value composed of the next ``nbits`` bits.
        :rtype: int
        :raises EOFError: If fewer than ``nbits`` bits remain; the position
            is left unchanged.
        """
        if nbits < 0:
            raise ValueError(f"nbits must be non-negative, got {nbits}")
        if nbits > self.remaining():
            raise EOFError("Unexpected end of data")
        result = 0
        for _ in range(nbits):
            result = (result << 1) | self.read_bit()
        return result

    def read_byte(self) -> int:
        """Read the next 8 bits as one byte value.

        :returns: Value in ``0..255``.
        :rtype: int
        :raises EOFError: If fewer than 8 bits remain.
        """
        return self.read_bits(8)

    def read_bytes(self, nbytes: int) -> bytes:
        """Read ``nbytes`` whole bytes.

        Any bits left in the current byte are skipped first.

        :param nbytes: Number of bytes to read.
        :type nbytes: int
        :returns: The next ``nbytes`` bytes.
        :rtype: bytes
        :raises ValueError: If ``nbytes`` is negative.
        :raises EOFError: If the array ends before ``nbytes`` full bytes.
        """
        if nbytes < 0:
            raise ValueError(f"nbytes must be non-negative, got {nbytes}")
        if nbytes == 0:
            return b""
        start = (self.pos + 7) >> 3
        end = start + nbytes
        if end * 8 > len(self.bits):
            raise EOFError("Unexpected end of data")
        result = self.bits.as_bytes()[start:end]
        self.pos = end * 8
        return result
