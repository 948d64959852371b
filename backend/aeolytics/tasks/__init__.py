"""
Background Tasks Package

Contains Celery tasks for async processing:
- processing_tasks: Scheduled query runs through the processing pipeline
- report_tasks: Weekly summary e-mails
"""

from aeolytics.tasks.processing_tasks import *
from aeolytics.tasks.report_tasks import *
