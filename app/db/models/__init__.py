# app/db/models/__init__.py
from .order_inquiry import OrderInquiry
from .submission_rate_limit import SubmissionRateLimit
from .user import User
