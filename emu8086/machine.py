"""CPU state: registers and one megabyte of memory."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Sequence

MEMORY_SIZE = 0xFFFFF + 1
REGISTER_COUNT = 22


@dataclass
class Machine:
    """An 8086 machine with zeroed registers and memory.

    ``load`` accepts any assembled program exposing ``code`` (the bytes
    emitted from ``start_address``), ``start_address``, ``end_address`` and
    ``instructions``.
    """

    memory: bytearray = field(default_factory=lambda: bytearray(MEMORY_SIZE))
    registers: list[int] = field(default_factory=lambda: [0] * REGISTER_COUNT)
    skip_next: bool = False
    instructions: Sequence[Any] = ()
    call_stack: int = 0
    is_first: bool = True
    port: int = -1
    code_start_addr: int = 0
    end_address: int = 0

    @property
    def code_segment(self) -> int:
        return self.code_start_addr // 0x10

    def _check(self, address: int) -> None:
        if not 0 <= address < len(self.memory):
            raise IndexError(f"address out of range: {address:#x}")

    def read_byte(self, address: int) -> int:
        self._check(address)
        return self.memory[address]

    def write_byte(self, address: int, value: int) -> None:
        """Store the low eight bits of ``value`` at ``address``."""
        self._check(address)
        self.memory[address] = value & 0xFF

    def load(self, program: Any) -> None:
        """Copy a program's code into memory and take over its layout."""
        start = program.start_address
        code = bytes(program.code)
        if start < 0 or start + len(code) > len(self.memory):
            raise ValueError("program does not fit in memory")
        self.memory[start:start + len(code)] = code
        self.code_start_addr = start
        self.end_address = program.end_address
        self.instructions = tuple(program.instructions)