from .user_service import create_user, update_user, deactivate_user
from . import otp_service
