import decimal

import bigexpr.constants as cst


class ArrayStack:
    """
    Array based stack of decimals used while evaluating postfix programs
    :param initial_capacity: amount of preallocated slots
    """
    def __init__(self, initial_capacity: int = cst.STACK_INITIAL_CAPACITY):
        if initial_capacity <= 0:
            raise ValueError("Stack's capacity must be positive")
        self._data: list[decimal.Decimal | None] = [None] * initial_capacity
        self._idx = -1

    @property
    def capacity(self) -> int:
        return len(self._data)

    def push(self, value: decimal.Decimal) -> None:
        if self._idx + 1 == len(self._data):
            self._data.extend([None] * (int(len(self._data) * cst.STACK_GROWTH_FACTOR) + 1 - len(self._data)))
        self._idx += 1
        self._data[self._idx] = value

    def peek(self) -> decimal.Decimal:
        if self._idx == -1:
            raise IndexError("peek from empty stack")
        return self._data[self._idx]  # type: ignore

    def pop(self) -> decimal.Decimal:
        if self._idx == -1:
            raise IndexError("pop from empty stack")
        value = self._data[self._idx]
        self._data[self._idx] = None
        self._idx -= 1
        return value  # type: ignore

    def is_empty(self) -> bool:
        return self._idx == -1

    def __len__(self) -> int:
        return self._idx + 1
