from typing import Iterable, Iterator, Optional, Union

BIT_ORDER = "msb"  #: Bit ``i`` is bit ``7 - i % 8`` of byte ``i // 8``


class BitArrayError(Exception):
    """Base class for all bit array errors."""


class OutOfBounds(BitArrayError, IndexError):
    """Raised when a bit index falls outside ``[0, len)``."""


class EmptyContainer(BitArrayError, IndexError):
    """Raised when removing bits from an empty array."""


class LengthMismatch(BitArrayError, ValueError):
    """Raised when a binary operation gets operands of unequal length."""


def _tail_mask(length: int) -> int:
    """Mask of the bits of the last byte that hold logical data.

    :param length: Logical length in bits.
    :type length: int
    :returns: ``0xFF`` for byte-aligned lengths, otherwise the leading
        ``length % 8`` bits set.
    :rtype: int
    """
    used = length & 7
    if used == 0:
        return 0xFF
    return (0xFF << (8 - used)) & 0xFF


def _check_size(value, name: str) -> int:
    """Validate a bit or byte count argument.

    :param value: Count to check.
    :type value: int
    :param name: Argument name used in error messages.
    :type name: str
    :returns: ``value`` unchanged.
    :rtype: int
    :raises TypeError: If ``value`` is not an int.
    :raises ValueError: If ``value`` is negative.
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an int, got {type(value).__name__}")
    if value < 0:
        raise ValueError(f"{name} must be non-negative, got {value}")
    return value


class BitArray:
    """Growable array of booleans packed eight to a byte.

    Bits are stored MSB-first: bit ``i`` lives in ``_bytes[i // 8]`` under
    the mask ``0x80 >> (i % 8)``. The byte buffer always holds exactly
    ``ceil(len / 8)`` bytes and every bit past the logical length in the
    last byte is zero, so bulk operations and equality can work on whole
    bytes.

    :ivar _bytes: Packed storage.
    :type _bytes: bytearray
    :ivar _length: Number of logical bits.
    :type _length: int
    :ivar _capacity: Bits reserved by :meth:`with_capacity` or kept by
        :meth:`clear`.
    :type _capacity: int
    """

    def __init__(self, bits: Optional[Iterable] = None):
        """Create an array, optionally filled from an iterable of truthy values.

        :param bits: Initial bits, in order.
        :type bits: Iterable | None
        :returns: None
        :rtype: None
        """
        self._bytes = bytearray()
        self._length = 0
        self._capacity = 0
        if bits is not None:
            self.extend(bits)

    # Construction

    @classmethod
    def new(cls) -> "BitArray":
        """Return an empty array."""
        return cls()

    @classmethod
    def with_capacity(cls, nbits: int) -> "BitArray":
        """Return an empty array that reports room for ``nbits`` bits.

        :param nbits: Number of bits to reserve.
        :type nbits: int
        :returns: Empty array with ``capacity() >= nbits``.
        :rtype: BitArray
        :raises ValueError: If ``nbits`` is negative.
        """
        result = cls()
        result._capacity = _check_size(nbits, "capacity")
        return result

    @classmethod
    def from_bits(cls, bits: Iterable) -> "BitArray":
        """Build an array whose bits match ``bits`` in order.

        :param bits: Values coerced with ``bool()``.
        :type bits: Iterable
        :returns: New array.
        :rtype: BitArray
        """
        return cls(bits)

    @classmethod
    def from_bytes(cls, data: bytes, length: Optional[int] = None) -> "BitArray":
        """Build an array from MSB-first packed bytes.

        Raw bytes cannot carry a length that is not a multiple of 8, so the
        logical length may be passed explicitly. Surplus trailing bytes are
        dropped and unused low bits of the last byte are cleared.

        :param data: Packed bytes, MSB-first.
        :type data: bytes
        :param length: Logical length in bits; defaults to ``len(data) * 8``.
        :type length: int | None
        :returns: New array.
        :rtype: BitArray
        :raises ValueError: If ``length`` is negative or exceeds the bits in
            ``data``.
        """
        if length is None:
            length = len(data) * 8
        _check_size(length, "length")
        if length > len(data) * 8:
            raise ValueError(
                f"length {length} exceeds {len(data) * 8} bits of data"
            )
        return cls._from_storage(bytearray(data[:(length + 7) >> 3]), length)

    @classmethod
    def from_string(cls, text: str) -> "BitArray":
        """Parse a string of ``0`` and ``1`` characters.

        Whitespace and ``_`` may be used as separators.

        :param text: Bit string, first character is bit 0.
        :type text: str
        :returns: New array.
        :rtype: BitArray
        :raises ValueError: On any other character.
        """
        values = []
        for ch in text:
            if ch == "1":
                values.append(True)
            elif ch == "0":
                values.append(False)
            elif ch.isspace() or ch == "_":
                continue
            else:
                raise ValueError(f"Invalid character in bit string: {ch!r}")
        return cls(values)

    @classmethod
    def from_text(cls, text: str) -> "BitArray":
        """Build an array holding the UTF-8 encoding of ``text``.

        :param text: Text to store.
        :type text: str
        :returns: New array of ``len(text.encode()) * 8`` bits.
        :rtype: BitArray
        """
        return cls.from_bytes(text.encode("utf-8"))

    @classmethod
    def _from_storage(cls, data: bytearray, length: int) -> "BitArray":
        result = cls()
        result._bytes = data
        result._length = length
        result._mask_tail()
        return result

    def copy(self) -> "BitArray":
        """Return an independent copy (the byte buffer is not shared)."""
        result = self._from_storage(bytearray(self._bytes), self._length)
        result._capacity = self._capacity
        return result

    __copy__ = copy

    def __deepcopy__(self, memo) -> "BitArray":
        return self.copy()

    # Size

    def __len__(self) -> int:
        return self._length

    def is_empty(self) -> bool:
        """Whether the array holds no bits.

        :returns: ``True`` when ``len == 0``.
        :rtype: bool
        """
        return self._length == 0

    def byte_len(self) -> int:
        """Number of bytes currently backing the array."""
        return len(self._bytes)

    def capacity(self) -> int:
        """Number of bits the array reports room for without growing.

        :returns: The larger of the reserved figure and the bits held by the
            current byte buffer.
        :rtype: int
        """
        return max(self._capacity, len(self._bytes) * 8)

    def shrink_to_fit(self) -> None:
        """Drop any reserved capacity beyond the current byte buffer."""
        self._capacity = 0

    # Single bits

    def _locate(self, index: int):
        """Map a bit index to ``(byte index, bit mask)``.

        :raises TypeError: If ``index`` is not an int.
        :raises OutOfBounds: If ``index`` is outside ``[0, len)``.
        """
        if isinstance(index, bool) or not isinstance(index, int):
            raise TypeError(
                f"bit index must be an int, got {type(index).__name__}"
            )
        if index < 0 or index >= self._length:
            raise OutOfBounds(
                f"bit index {index} out of range for length {self._length}"
            )
        return index >> 3, 0x80 >> (index & 7)

    def get(self, index: int) -> bool:
        """Return the bit at ``index``.

        :param index: Bit position, ``0 <= index < len``.
        :type index: int
        :returns: Bit value.
        :rtype: bool
        :raises OutOfBounds: If ``index`` is out of range.
        """
        byte_index, mask = self._locate(index)
        return self._bytes[byte_index] & mask != 0

    def set(self, index: int, value: bool) -> None:
        """Write the bit at ``index``. Never grows the array.

        :param index: Bit position, ``0 <= index < len``.
        :type index: int
        :param value: New bit value.
        :type value: bool
        :returns: None
        :rtype: None
        :raises OutOfBounds: If ``index`` is out of range.
        """
        byte_index, mask = self._locate(index)
        if value:
            self._bytes[byte_index] |= mask
        else:
            self._bytes[byte_index] &= ~mask & 0xFF

    def toggle(self, index: int) -> None:
        """Flip the bit at ``index``.

        :raises OutOfBounds: If ``index`` is out of range.
        """
        byte_index, mask = self._locate(index)
        self._bytes[byte_index] ^= mask

    def __getitem__(self, index: int) -> bool:
        return self.get(index)

    def __setitem__(self, index: int, value: bool) -> None:
        self.set(index, value)

    # Growth

    def push(self, value: bool) -> None:
        """Append one bit, adding a zeroed byte when the last one is full.

        :param value: Bit to append.
        :type value: bool
        :returns: None
        :rtype: None
        """
        offset = self._length & 7
        if offset == 0:
            self._bytes.append(0)
        if value:
            self._bytes[-1] |= 0x80 >> offset
        self._length += 1

    def pop(self) -> bool:
        """Remove and return the last bit.

        The vacated bit is cleared, and the last byte is released once it no
        longer holds any logical bit.

        :returns: The removed bit.
        :rtype: bool
        :raises EmptyContainer: If the array is empty.
        """
        if self._length == 0:
            raise EmptyContainer("pop from empty BitArray")
        index = self._length - 1
        mask = 0x80 >> (index & 7)
        bit = self._bytes[-1] & mask != 0
        self._bytes[-1] &= ~mask & 0xFF
        self._length = index
        if index & 7 == 0:
            del self._bytes[-1]
        return bit

    def resize(self, new_length: int, fill: bool = False) -> None:
        """Grow or truncate the array to ``new_length`` bits.

        New bits take the value ``fill``. Truncation clears the dropped bits
        and releases bytes that no longer hold data, so the buffer is always
        exactly ``ceil(new_length / 8)`` bytes long afterwards.

        :param new_length: Target logical length.
        :type new_length: int
        :param fill: Value of bits added when growing.
        :type fill: bool
        :returns: None
        :rtype: None
        :raises ValueError: If ``new_length`` is negative.
        """
        _check_size(new_length, "new_length")
        nbytes = (new_length + 7) >> 3
        if new_length <= self._length:
            del self._bytes[nbytes:]
        elif fill:
            offset = self._length & 7
            if offset:
                self._bytes[-1] |= 0xFF >> offset
            self._bytes.extend(b"\xff" * (nbytes - len(self._bytes)))
        else:
            self._bytes.extend(bytes(nbytes - len(self._bytes)))
        self._length = new_length
        self._mask_tail()

    def clear(self) -> None:
        """Remove every bit and free the buffer.

        The capacity figure is kept, so ``capacity()`` does not drop until
        :meth:`shrink_to_fit` is called.
        """
        self._capacity = self.capacity()
        self._bytes = bytearray()
        self._length = 0

    def fill(self, value: bool) -> None:
        """Set every logical bit to ``value``."""
        byte = 0xFF if value else 0x00
        self._bytes[:] = bytes([byte]) * len(self._bytes)
        self._mask_tail()

    def push_byte(self, byte: int) -> None:
        """Append the 8 bits of ``byte``, most significant bit first.

        Works at any alignment: when the array does not end on a byte
        boundary the value is split across the last byte and a new one.

        :param byte: Value in ``0..255``.
        :type byte: int
        :returns: None
        :rtype: None
        :raises ValueError: If ``byte`` is out of range.
        """
        if isinstance(byte, bool) or not isinstance(byte, int):
            raise TypeError(f"byte must be an int, got {type(byte).__name__}")
        if not 0 <= byte <= 0xFF:
            raise ValueError(f"byte must be in range 0..255, got {byte}")
        offset = self._length & 7
        if offset == 0:
            self._bytes.append(byte)
        else:
            self._bytes[-1] |= byte >> offset
            self._bytes.append((byte << (8 - offset)) & 0xFF)
        self._length += 8

    def pop_byte(self) -> int:
        """Remove the last 8 bits and return them as an int, MSB-first.

        With fewer than 8 bits left, those bits are returned left-aligned
        (low bits zero) and the array becomes empty.

        :returns: Value in ``0..255``.
        :rtype: int
        :raises EmptyContainer: If the array is empty.
        """
        if self._length == 0:
            raise EmptyContainer("pop_byte from empty BitArray")
        if self._length < 8:
            value = self._bytes[0]
            self._bytes = bytearray()
            self._length = 0
            return value
        offset = self._length & 7
        last = self._bytes.pop()
        self._length -= 8
        if offset == 0:
            return last
        head = (self._bytes[-1] << offset) & 0xFF
        self._mask_tail()
        return head | (last >> (8 - offset))

    def extend(self, bits: Union["BitArray", Iterable]) -> None:
        """Append another array, or an iterable of truthy values.

        :param bits: Bits to append, in order.
        :type bits: BitArray | Iterable
        :returns: None
        :rtype: None
        """
        if not isinstance(bits, BitArray):
            for value in [bool(v) for v in bits]:
                self.push(value)
            return
        other = bits.copy() if bits is self else bits
        if self._length & 7 == 0:
            self._bytes.extend(other._bytes)
            self._length += other._length
            return
        whole = other._length >> 3
        for byte in other._bytes[:whole]:
            self.push_byte(byte)
        for index in range(whole * 8, other._length):
            self.push(other.get(index))

    def concat(self, other: Union["BitArray", Iterable]) -> "BitArray":
        """Return a new array holding this array's bits followed by ``other``."""
        result = self.copy()
        result.extend(other)
        return result

    def __add__(self, other):
        if not isinstance(other, BitArray):
            return NotImplemented
        return self.concat(other)

    def __iadd__(self, other):
        if isinstance(other, str):
            return NotImplemented
        try:
            iter(other)
        except TypeError:
            return NotImplemented
        self.extend(other)
        return self

    def _mask_tail(self) -> None:
        if self._bytes:
            self._bytes[-1] &= _tail_mask(self._length)

    # Bitwise operations

    def _combine(self, other: "BitArray", op) -> bytearray:
        """Apply ``op`` to both buffers taken as big integers.

        :param other: Right operand.
        :type other: BitArray
        :param op: Function of two ints.
        :type op: Callable[[int, int], int]
        :returns: Combined buffer, tail masked.
        :rtype: bytearray
        :raises TypeError: If ``other`` is not a ``BitArray``.
        :raises LengthMismatch: If lengths differ.
        """
        if not isinstance(other, BitArray):
            raise TypeError(
                f"expected BitArray, got {type(other).__name__}"
            )
        if self._length != other._length:
            raise LengthMismatch(
                f"operands have different lengths: "
                f"{self._length} and {other._length}"
            )
        nbytes = len(self._bytes)
        value = op(
            int.from_bytes(self._bytes, "big"),
            int.from_bytes(other._bytes, "big"),
        )
        value &= (1 << (nbytes * 8)) - 1
        data = bytearray(value.to_bytes(nbytes, "big"))
        if data:
            data[-1] &= _tail_mask(self._length)
        return data

    def and_(self, other: "BitArray") -> "BitArray":
        """Bitwise AND of two equal-length arrays.

        :raises LengthMismatch: If lengths differ.
        """
        return self._from_storage(
            self._combine(other, lambda a, b: a & b), self._length
        )

    def or_(self, other: "BitArray") -> "BitArray":
        """Bitwise OR of two equal-length arrays.

        :raises LengthMismatch: If lengths differ.
        """
        return self._from_storage(
            self._combine(other, lambda a, b: a | b), self._length
        )

    def xor(self, other: "BitArray") -> "BitArray":
        """Bitwise XOR of two equal-length arrays.

        :raises LengthMismatch: If lengths differ.
        """
        return self._from_storage(
            self._combine(other, lambda a, b: a ^ b), self._length
        )

    def nand(self, other: "BitArray") -> "BitArray":
        """Complement of :meth:`and_`; padding stays zero.

        :raises LengthMismatch: If lengths differ.
        """
        return self._from_storage(
            self._combine(other, lambda a, b: ~(a & b)), self._length
        )

    def not_(self) -> "BitArray":
        """Return the complement of every logical bit.

        A byte-wise complement also sets the padding bits, so the tail is
        masked again before returning.
        """
        return self._from_storage(
            bytearray(b ^ 0xFF for b in self._bytes), self._length
        )

    def __and__(self, other):
        if not isinstance(other, BitArray):
            return NotImplemented
        return self.and_(other)

    def __or__(self, other):
        if not isinstance(other, BitArray):
            return NotImplemented
        return self.or_(other)

    def __xor__(self, other):
        if not isinstance(other, BitArray):
            return NotImplemented
        return self.xor(other)

    def __iand__(self, other):
        if not isinstance(other, BitArray):
            return NotImplemented
        self._bytes = self._combine(other, lambda a, b: a & b)
        return self

    def __ior__(self, other):
        if not isinstance(other, BitArray):
            return NotImplemented
        self._bytes = self._combine(other, lambda a, b: a | b)
        return self

    def __ixor__(self, other):
        if not isinstance(other, BitArray):
            return NotImplemented
        self._bytes = self._combine(other, lambda a, b: a ^ b)
        return self

    def __invert__(self) -> "BitArray":
        return self.not_()

    # Queries

    def count_ones(self) -> int:
        """Number of set bits among the logical bits."""
        return bin(int.from_bytes(self._bytes, "big")).count("1")

    def count_zeros(self) -> int:
        """Number of clear bits among the logical bits."""
        return self._length - self.count_ones()

    def any(self) -> bool:
        """Whether at least one logical bit is set.

        :returns: ``False`` for an empty array.
        :rtype: bool
        """
        return any(self._bytes)

    def all(self) -> bool:
        """Whether every logical bit is set.

        :returns: ``True`` for an empty array.
        :rtype: bool
        """
        return self.count_ones() == self._length

    def is_zero(self) -> bool:
        """``True`` when no bit is set (also for an empty array)."""
        return not self.any()

    def next_set_bit(self, start: int = 0) -> Optional[int]:
        """Find the first set bit at or after ``start``.

        :param start: First position to examine, ``0 <= start <= len``.
        :type start: int
        :returns: Index of the set bit, or ``None`` if there is none.
        :rtype: int | None
        :raises OutOfBounds: If ``start`` is outside ``[0, len]``.
        """
        if isinstance(start, bool) or not isinstance(start, int):
            raise TypeError(f"start must be an int, got {type(start).__name__}")
        if start < 0 or start > self._length:
            raise OutOfBounds(
                f"start {start} out of range for length {self._length}"
            )
        byte_index = start >> 3
        if byte_index >= len(self._bytes):
            return None
        byte = self._bytes[byte_index] & (0xFF >> (start & 7))
        while not byte:
            byte_index += 1
            if byte_index >= len(self._bytes):
                return None
            byte = self._bytes[byte_index]
        return byte_index * 8 + 8 - byte.bit_length()

    def iter(self) -> Iterator[bool]:
        """Yield each logical bit in order.

        Every call returns a fresh generator; iterating never mutates the
        array.
        """
        index = 0
        while index < self._length:
            yield self._bytes[index >> 3] & (0x80 >> (index & 7)) != 0
            index += 1

    def __iter__(self) -> Iterator[bool]:
        return self.iter()

    # Comparison and conversion

    def __eq__(self, other) -> bool:
        if not isinstance(other, BitArray):
            return NotImplemented
        # Padding bits are always zero, so whole bytes can be compared.
        return self._length == other._length and self._bytes == other._bytes

    __hash__ = None

    def as_bytes(self) -> bytes:
        """Return a copy of the packed storage, MSB-first, zero padded."""
        return bytes(self._bytes)

    def as_char(self) -> str:
        """Decode the packed storage as UTF-8 text.

        Invalid sequences are replaced with ``U+FFFD``; a partial last byte
        is decoded with its zero padding.

        :returns: Text view of the buffer.
        :rtype: str
        """
        return self._bytes.decode("utf-8", errors="replace")

    def to_string(self) -> str:
        """Return the bits as a string of ``0`` and ``1``."""
        return "".join("1" if bit else "0" for bit in self)

    def as_binary(self, group: int = 8) -> str:
        """Return the logical bits in space-separated groups.

        :param group: Bits per group.
        :type group: int
        :returns: E.g. ``"10110000 101"`` for an 11-bit array.
        :rtype: str
        :raises ValueError: If ``group`` is not positive.
        """
        if group <= 0:
            raise ValueError(f"group must be positive, got {group}")
        text = self.to_string()
        return " ".join(
            text[i:i + group] for i in range(0, len(text), group)
        )

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"{type(self).__name__}.from_string({self.to_string()!r})"
