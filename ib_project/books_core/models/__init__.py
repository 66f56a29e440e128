from .activitylog import ActivityLog
from .customer import Customer
from .employee import Employee
from .petty_cash import PettyCashAdvance
from .project import Project
from .transaction import Transaction
from .user import User
