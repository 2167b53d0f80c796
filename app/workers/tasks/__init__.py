from app.workers.tasks.loyalty_milestones import run_loyalty_milestone_scan
from app.workers.tasks.qr_token_cleanup import run_qr_token_cleanup

__all__ = [
    "run_loyalty_milestone_scan",
    "run_qr_token_cleanup",
]
