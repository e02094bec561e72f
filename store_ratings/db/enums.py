import enum

class Role(enum.StrEnum):
    ADMIN = "ADMIN"
    OWNER = "OWNER"
    USER = "USER"

class SortOrder(enum.StrEnum):
    ASC = "asc"
    DESC = "desc"
