from enum import Enum


class Role(Enum):
    CUSTOMER = "CUSTOMER"
    ADMIN = "ADMIN"
