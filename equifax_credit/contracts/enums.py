"""Closed code sets of the BKI 3.4 request/response format.

Values are the literal codes written to the wire. Construction of a document
with a value outside a set fails in pydantic validation.
"""

from enum import Enum


# ---------------------------------------------------------------------------
# Subject & identity
# ---------------------------------------------------------------------------

class Country(str, Enum):
    RU = "RU"
    BY = "BY"
    KZ = "KZ"
    UA = "UA"
    AM = "AM"
    AZ = "AZ"
    KG = "KG"
    MD = "MD"
    TJ = "TJ"
    UZ = "UZ"
    GE = "GE"
    TM = "TM"
    DE = "DE"
    US = "US"
    CN = "CN"


class Gender(str, Enum):
    MALE = "1"
    FEMALE = "2"


class DocType(str, Enum):
    PASSPORT_RF = "1"
    INTERNATIONAL_PASSPORT = "2"
    MILITARY_ID = "3"
    FOREIGN_PASSPORT = "4"
    RESIDENCE_PERMIT = "5"
    REFUGEE_CERTIFICATE = "6"
    TEMPORARY_ID = "7"
    OTHER = "99"


class Resident(str, Enum):
    NON_RESIDENT = "0"
    RESIDENT = "1"


class Marital(str, Enum):
    SINGLE = "0"
    MARRIED = "1"
    DIVORCED = "2"
    WIDOWED = "3"
    CIVIL_MARRIAGE = "4"


class Education(str, Enum):
    SECONDARY_INCOMPLETE = "1"
    SECONDARY = "2"
    SECONDARY_SPECIAL = "3"
    HIGHER_INCOMPLETE = "4"
    HIGHER = "5"
    SECOND_HIGHER = "6"
    ACADEMIC_DEGREE = "7"


class AddressOwner(str, Enum):
    OWNER = "1"
    CO_OWNER = "2"
    TENANT = "3"
    RELATIVES = "4"
    OTHER = "5"


# ---------------------------------------------------------------------------
# Employment & company
# ---------------------------------------------------------------------------

class EmploymentCurrent(str, Enum):
    PREVIOUS = "0"
    CURRENT = "1"


class EmploymentType(str, Enum):
    FULL_TIME = "1"
    PART_TIME = "2"
    SELF_EMPLOYED = "3"
    CONTRACT = "4"
    PENSIONER = "5"
    UNEMPLOYED = "6"


class Profession(str, Enum):
    TOP_MANAGER = "1"
    MANAGER = "2"
    SPECIALIST = "3"
    OFFICE_STAFF = "4"
    WORKER = "5"
    MILITARY = "6"
    CIVIL_SERVANT = "7"
    OTHER = "99"


class CompanyState(str, Enum):
    NON_STATE = "0"
    STATE = "1"


class CompanySize(str, Enum):
    UP_TO_10 = "1"
    UP_TO_50 = "2"
    UP_TO_100 = "3"
    UP_TO_500 = "4"
    OVER_500 = "5"


class CompanyArea(str, Enum):
    FINANCE = "1"
    TRADE = "2"
    MANUFACTURING = "3"
    CONSTRUCTION = "4"
    TRANSPORT = "5"
    IT_TELECOM = "6"
    HEALTHCARE = "7"
    EDUCATION = "8"
    GOVERNMENT = "9"
    SERVICES = "10"
    OTHER = "99"


# ---------------------------------------------------------------------------
# Application & credit terms
# ---------------------------------------------------------------------------

class Consent(str, Enum):
    NO = "0"
    YES = "1"


class AdmCodeInForm(str, Enum):
    NOT_INFORMED = "0"
    INFORMED = "1"


class IncomeFrequency(str, Enum):
    MONTHLY = "1"
    QUARTERLY = "2"
    YEARLY = "3"
    IRREGULAR = "4"


class Purpose(str, Enum):
    CONSUMER_GOODS = "1"
    CAR = "2"
    REAL_ESTATE = "3"
    EDUCATION = "4"
    REFINANCING = "5"
    BUSINESS = "6"
    OTHER = "99"


class Cred(str, Enum):
    AUTO = "1"
    MORTGAGE = "2"
    CREDIT_CARD = "3"
    CONSUMER = "4"
    BUSINESS = "5"
    MICROLOAN = "6"
    OTHER = "99"


class SumCurrency(str, Enum):
    RUR = "RUR"
    USD = "USD"
    EUR = "EUR"


class CredSecurity(str, Enum):
    NONE = "0"
    PLEDGE = "1"
    GUARANTEE = "2"
    PLEDGE_AND_GUARANTEE = "3"
    INSURANCE = "4"


class Reason(str, Enum):
    """Purpose of the credit report request (``<reason>``)."""

    LOAN_APPLICATION = "1"
    EXISTING_OBLIGATIONS = "2"
    EMPLOYMENT = "3"
    INSURANCE = "4"
    LEASE = "5"
    OTHER = "99"


# ---------------------------------------------------------------------------
# Reply
# ---------------------------------------------------------------------------

class ResponseCode(str, Enum):
    ACCEPTED = "0"
    NOT_FOUND = "1"
    REJECTED = "2"
    ERROR = "3"
    UNKNOWN = "unknown"

    @classmethod
    def from_code(cls, code: str) -> "ResponseCode":
        try:
            return cls(code.strip())
        except ValueError:
            return cls.UNKNOWN
