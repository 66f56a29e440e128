from .actions import (mark_projects_active, mark_projects_cancelled,
                      mark_projects_completed, void_transactions)
from .activitylog import ActivityLogAdmin
from .customer import CustomerAdmin, EmployeeAdmin
from .forms import (PettyCashAdvanceAdminForm, TransactionAdminForm,
                    UserAdminChangeForm, UserAdminCreationForm)
from .inlines import PettyCashAdvanceInline, ProjectInline, TransactionInline
from .petty_cash import PettyCashAdvanceAdmin
from .project import ProjectAdmin
from .ReadOnly import ReadOnlyAdmin
from .transaction import TransactionAdmin
from .user import UserAdmin
