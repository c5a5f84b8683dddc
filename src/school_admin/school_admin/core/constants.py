"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from .enums import Role

PAGE_SIZE = 20
QUICK_SEARCH_LIMIT = 20
MIN_PASSWORD_LENGTH = 6
DEFAULT_PROFILE_TAB = "account"

# Relation name accepted from forms; resolved to PARENTS/CHILDREN by role.
FAMILY_RELATION = "family"

ROLE_LABELS = {
    Role.ADMIN: "Administrator",
    Role.MANAGER: "Manager",
    Role.TEACHER: "Teacher",
    Role.STUDENT: "Student",
    Role.PARENT: "Parent",
}
