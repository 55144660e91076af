from dataclasses import dataclass
from typing import Optional, Literal

Severity = Literal['info', 'success', 'warning', 'error']


@dataclass(frozen=True)
class DraftNotice:
    """Transient message shown after a draft action (toast or status bar)."""

    title: str
    message: str
    severity: Severity = 'info'
    source: str = 'Drafts'
    entity_id: Optional[str] = None
    duration_ms: int = 4500
