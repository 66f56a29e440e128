from .dashboard import dashboard_summary, project_summary
from .petty_cash import issue_advance, record_advance_return, settle_advance
from .projects import create_project
from .transactions import (amend_transaction, record_transaction,
                           void_transaction)
