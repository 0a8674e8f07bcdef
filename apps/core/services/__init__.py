from . import expiry_service
from .policy_service import create_policy, update_policy, delete_policy, import_policies, get_policy
from . import followup_service
from . import lifecycle_service
from . import summary_service
from . import ad_service
