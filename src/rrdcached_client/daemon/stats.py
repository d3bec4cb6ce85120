"""Decoder for the STATS report.

    <N> Statistics follow
    QueueLength: 0
    UpdatesReceived: 12
    ...
"""

from dataclasses import dataclass

# Counters are unsigned 64-bit on the daemon side
MAX_COUNTER = 2**64 - 1

# Daemon label -> Stats field. Labels not listed here are ignored.
STATS_LABELS: dict[str, str] = {
    "QueueLength": "queue_length",
    "CreatesReceived": "creates_received",
    "UpdatesReceived": "updates_received",
    "FlushesReceived": "flushes_received",
    "UpdatesWritten": "updates_written",
    "DataSetsWritten": "data_sets_written",
    "TreeNodesNumber": "tree_nodes_number",
    "TreeDepth": "tree_depth",
    "JournalBytes": "journal_bytes",
    "JournalRotate": "journal_rotate",
}


@dataclass(frozen=True)
class Stats:
    """Daemon counters. Counters the daemon did not report are zero."""

    queue_length: int = 0
    creates_received: int = 0
    updates_received: int = 0
    flushes_received: int = 0
    updates_written: int = 0
    data_sets_written: int = 0
    tree_nodes_number: int = 0
    tree_depth: int = 0
    journal_bytes: int = 0
    journal_rotate: int = 0

    def as_labels(self) -> dict[str, int]:
        """Counters keyed by the daemon's label names."""
        return {label: getattr(self, name) for label, name in STATS_LABELS.items()}


def decode_stats(raw: str) -> Stats:
    """Parse a STATS reply into counters.

    Reads at most the number of lines the header announces and tolerates fewer.
    Lines that are not ``Label: <unsigned int>`` are skipped, and so are values
    that do not fit in 64 bits.
    """
    lines = raw.strip().split("\n")
    token = lines[0].split(" ", 1)[0]
    if not (token.isascii() and token.isdigit()):
        return Stats()

    counters: dict[str, int] = {}
    for line in lines[1 : int(token) + 1]:
        label, sep, value = line.partition(": ")
        name = STATS_LABELS.get(label)
        if not sep or name is None:
            continue
        value = value.strip()
        if value.isascii() and value.isdigit() and int(value) <= MAX_COUNTER:
            counters[name] = int(value)
    return Stats(**counters)
