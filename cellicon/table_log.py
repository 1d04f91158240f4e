"""
cellicon TableLog - Diff Logging for Signal Outputs
===================================================

A TableLogBuffer is a bounded ring of column changes: every row says that a
column took a new value at some time. Signals feed it through the
``log_diffs`` operator, which records the initial value once per activation
and then every value that differs from the previous one.

Recording is best-effort. It never blocks the propagation that triggered it,
and a failing buffer is reported through ``logging`` without reaching the
computation or its subscribers.

Values that expose ``table_columns()`` are diffable: they are expanded into
one row per column, and only the columns that changed are recorded.
"""

import io
import logging
import time
from collections import deque
from typing import Any, Callable, Dict, List, NamedTuple, Optional

from rich.console import Console
from rich.table import Table

from .signal import NULL_EVENT, Observer, Signal, Unsubscribe


class TableChange(NamedTuple):
    """One recorded column change."""

    timestamp: float
    column: str
    previous: Any
    value: Any
    is_initial: bool


def column_name(prefix: str, name: str) -> str:
    """Join a column prefix and name the way the table columns are keyed."""
    if not prefix:
        return name
    if not name:
        return prefix
    return f"{prefix}.{name}"


def _columns_of(value: Any) -> Optional[Dict[str, Any]]:
    table_columns = getattr(value, "table_columns", None)
    if table_columns is None:
        return None
    return table_columns()


class TableLogBuffer:
    """
    Bounded diagnostic buffer of column changes.

    Appending to the underlying deque is atomic, so writers on different
    threads never wait on each other.
    """

    def __init__(
        self,
        name: str,
        max_size: int = 100,
        clock: Callable[[], float] = time.time,
    ):
        if max_size <= 0:
            raise ValueError(f"max_size must be positive, got {max_size}")
        self.name = name
        self.max_size = max_size
        self._clock = clock
        self._rows: deque = deque(maxlen=max_size)

    def record(self, column: str, previous: Any, new: Any, is_initial: bool = False) -> None:
        """Append one change for ``column``."""
        self._rows.append(TableChange(self._clock(), column, previous, new, is_initial))

    def log_diffs(
        self,
        column_prefix: str,
        name: str,
        previous: Any,
        new: Any,
        is_initial: bool = False,
    ) -> None:
        """
        Record the difference between two values.

        Diffable values record only the columns that changed (all of them for
        the initial value or when the previous value is of another shape).
        """
        new_columns = _columns_of(new)
        if new_columns is None:
            self.record(column_name(column_prefix, name), previous, new, is_initial)
            return

        old_columns = None if is_initial else _columns_of(previous)
        prefix = column_name(column_prefix, name)
        for key, value in new_columns.items():
            old = NULL_EVENT if old_columns is None else old_columns.get(key, NULL_EVENT)
            if old is not NULL_EVENT and old == value:
                continue
            self.record(
                column_name(prefix, key),
                None if old is NULL_EVENT else old,
                value,
                is_initial,
            )

    def rows(self) -> List[TableChange]:
        """Snapshot of the recorded rows, oldest first."""
        return list(self._rows)

    def latest(self, column: str) -> Any:
        """Most recent value recorded for ``column``, or None."""
        for row in reversed(self._rows):
            if row.column == column:
                return row.value
        return None

    def clear(self) -> None:
        self._rows.clear()

    def to_table(self) -> Table:
        table = Table(title=f"{self.name} (last {len(self._rows)} of max {self.max_size})")
        table.add_column("time", style="dim")
        table.add_column("column")
        table.add_column("value")
        for row in self._rows:
            stamp = time.strftime("%m-%d %H:%M:%S", time.localtime(row.timestamp))
            marker = " (initial)" if row.is_initial else ""
            table.add_row(stamp, row.column, f"{row.value}{marker}")
        return table

    def dump(self, console: Optional[Console] = None) -> None:
        """Print the buffer as a table."""
        (console or Console()).print(self.to_table())

    def render(self, width: int = 120) -> str:
        """Render the buffer to plain text."""
        output = io.StringIO()
        Console(file=output, width=width, color_system=None).print(self.to_table())
        return output.getvalue()

    def __len__(self) -> int:
        return len(self._rows)

    def __repr__(self) -> str:
        return f"TableLogBuffer({self.name}, rows={len(self._rows)}, max_size={self.max_size})"


# ============================================================================
# LOG DIFFS OPERATOR
# ============================================================================


class DiffLoggedSignal(Signal[Any]):
    """
    Pass-through signal that records its changes into a TableLogBuffer.

    Upstream values are always forwarded, whether or not recording succeeds.
    """

    __slots__ = ("_source", "_buffer", "_column_prefix", "_column_name", "_initial_value")

    def __init__(
        self,
        source: Signal[Any],
        buffer: TableLogBuffer,
        column_prefix: str = "",
        column_name: str = "",
        initial_value: Any = NULL_EVENT,
    ):
        super().__init__(source.name, source.dispatcher)
        self._source = source
        self._buffer = buffer
        self._column_prefix = column_prefix
        self._column_name = column_name
        self._initial_value = initial_value

    @property
    def value(self) -> Any:
        return self._source.value

    def _safe_log(self, previous: Any, new: Any, is_initial: bool) -> None:
        try:
            self._buffer.log_diffs(
                self._column_prefix, self._column_name, previous, new, is_initial
            )
        except Exception as e:
            column = column_name(self._column_prefix, self._column_name)
            logging.error(f"Error recording '{column}' into {self._buffer!r}: {e}")

    def _observe(self, observer: Observer) -> Unsubscribe:
        previous = [self._initial_value]
        if self._initial_value is not NULL_EVENT:
            self._safe_log(None, self._initial_value, True)

        def on_source_change(new_value):
            if previous[0] is NULL_EVENT:
                self._safe_log(None, new_value, True)
            elif previous[0] != new_value:
                self._safe_log(previous[0], new_value, False)
            previous[0] = new_value
            observer(new_value)

        return self._source._observe(on_source_change)


__all__ = ["TableChange", "TableLogBuffer", "DiffLoggedSignal", "column_name"]
