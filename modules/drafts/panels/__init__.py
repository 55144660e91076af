from .delete_draft_button import DeleteDraftButton
from .status_badges import AreaStatusBadge, ChecklistCardBadge, pending_label

__all__ = ["AreaStatusBadge", "ChecklistCardBadge", "DeleteDraftButton", "pending_label"]
