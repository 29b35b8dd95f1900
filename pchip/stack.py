#!/usr/bin/env python3

"""
Stack Emulator

It is unnecessary to include the CPU call stack as part of system RAM, because
there is no specified location for it.  There is also no stack pointer (SP)
register exposed to the running program, so a list is enough to fully emulate
it.  The stack pointer is simply the length of the list.

Overflowing or underflowing the stack is fatal.  CHIP-8 has no way of
recovering from either, so the CPU halts and reports the fault.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .constants import STACK_SIZE


class StackError(Exception):
    pass


class StackOverflow(StackError):
    pass


class StackUnderflow(StackError):
    pass


class Stack:
    def __init__(self, size=STACK_SIZE):
        self.items = []
        self.size = size

    def __len__(self):
        return len(self.items)

    def push(self, item):
        if len(self.items) >= self.size:
            raise StackOverflow("Stack overflow")

        self.items.append(item)

    def pop(self):
        try:
            return self.items.pop()
        except IndexError:
            raise StackUnderflow("Stack underflow") from None

    def clear(self):
        self.items.clear()

    def get_items(self):
        # For debugging
        return self.items
