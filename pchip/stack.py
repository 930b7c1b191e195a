#!/usr/bin/env python3

"""
Stack Emulator

CHIP-8 has no specified location for its call stack, and the stack pointer is
not visible to running programs, so the stack is kept out of RAM and wrapped
around a list.  Only return addresses are ever stored.

Overflow and underflow both raise StackError, before anything is changed, so
the CPU can reject the instruction that caused them without side effects.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .constants import STACK_SIZE


class StackError(Exception):
    pass


class Stack:
    def __init__(self, size=STACK_SIZE):
        self.items = []
        self.size = size

    @property
    def sp(self):
        # The stack pointer is simply the number of entries in use
        return len(self.items)

    def push(self, item):
        if len(self.items) >= self.size:
            raise StackError("Stack overflow")

        self.items.append(item)

    def pop(self):
        try:
            return self.items.pop()
        except IndexError:
            raise StackError("Stack underflow") from None

    def clear(self):
        self.items.clear()

    def get_items(self):
        # For debugging and snapshots
        return list(self.items)

    def set_items(self, items):
        if len(items) > self.size:
            raise StackError("Stack overflow")

        self.items = list(items)
