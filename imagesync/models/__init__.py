"""
Data models shared by the consistency audit and the notification relay.
"""

from imagesync.models.notice import QueueMessage, UploadNotice
from imagesync.models.report import ReconciliationReport

__all__ = ["QueueMessage", "ReconciliationReport", "UploadNotice"]
