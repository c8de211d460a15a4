import sqlite3
import threading
import time
from typing import Any, Dict, Optional

from fr_law.tools.context import ToolContext

# Statute database (read-only, shared by request threads)
db: Optional[sqlite3.Connection] = None
db_path: Optional[str] = None
db_error: Optional[str] = None
tool_context: ToolContext = ToolContext()

# Tool call stats (for monitoring)
tool_stats_lock = threading.Lock()
tool_stats: Dict[str, Any] = {
    'total_calls': 0,
    'failures': 0,
    'by_tool': {},
    'last_call_time': None,
}

# Metrics
REQUEST_COUNT: Any = None
REQUEST_LATENCY: Any = None
TOOL_CALLS_TOTAL: Any = None


def record_tool_call(name: str, ok: bool = True) -> None:
    """Update tool call statistics for monitoring."""
    with tool_stats_lock:
        tool_stats['total_calls'] = int(tool_stats.get('total_calls') or 0) + 1
        tool_stats['last_call_time'] = time.time()
        by_tool = tool_stats.setdefault('by_tool', {})
        by_tool[name] = int(by_tool.get(name) or 0) + 1
        if not ok:
            tool_stats['failures'] = int(tool_stats.get('failures') or 0) + 1
    if TOOL_CALLS_TOTAL is not None:
        TOOL_CALLS_TOTAL.labels(name, 'ok' if ok else 'error').inc()
