from .organization import Organization
from .role import Permission, Role, role_permissions
from .user import User
from .menu_item import MenuItem
from .job_offer import JobOffer
from .candidate import Candidate
from .application import Application
from .interview import Interview
from .setting import Setting
from .notification import Notification
# base and mixins are imported by the above as needed
