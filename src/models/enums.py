"""Closed vocabularies for catalog, pharmacy and offer fields."""

from enum import Enum


class MedicineCategory(str, Enum):
    """Physical form of a medicine."""

    TABLET = "tablet"
    CAPSULE = "capsule"
    SYRUP = "syrup"
    INJECTION = "injection"
    CREAM = "cream"
    DROPS = "drops"
    INHALER = "inhaler"
    OINTMENT = "ointment"
    POWDER = "powder"
    SUSPENSION = "suspension"
    GEL = "gel"
    PATCH = "patch"
    SUPPOSITORY = "suppository"
    OTHER = "other"


class TherapeuticClass(str, Enum):
    """Clinical category, independent of physical form."""

    ONCOLOGY = "oncology"
    DIABETES = "diabetes"
    HYPERTENSION = "hypertension"
    ANTIBIOTICS = "antibiotics"
    PAINKILLERS = "painkillers"
    VITAMINS = "vitamins"
    SUPPLEMENTS = "supplements"
    CARDIOVASCULAR = "cardiovascular"
    RESPIRATORY = "respiratory"
    GASTRO = "gastro"
    DERMATOLOGY = "dermatology"
    PEDIATRICS = "pediatrics"
    MENTAL_HEALTH = "mental_health"
    CONTRACEPTIVES = "contraceptives"
    GENERAL = "general"


class PregnancyCategory(str, Enum):
    A = "A"
    B = "B"
    C = "C"
    D = "D"
    X = "X"
    NOT_APPLICABLE = "N/A"


class OfferStatus(str, Enum):
    """Stock state of one (pharmacy, medicine) offer."""

    AVAILABLE = "available"
    LOW_STOCK = "low_stock"
    OUT_OF_STOCK = "out_of_stock"
    DISCONTINUED = "discontinued"


class PharmacyService(str, Enum):
    PRESCRIPTION = "prescription"
    CONSULTATION = "consultation"
    DELIVERY = "delivery"
    INSURANCE = "insurance"
    VACCINATION = "vaccination"
    BLOOD_PRESSURE_CHECK = "blood_pressure_check"
    DIABETES_TESTING = "diabetes_testing"


class PharmacySpecialty(str, Enum):
    ONCOLOGY = "oncology"
    DIABETES = "diabetes"
    HYPERTENSION = "hypertension"
    PEDIATRICS = "pediatrics"
    GERIATRICS = "geriatrics"
    GENERAL = "general"


class SubscriptionStatus(str, Enum):
    PENDING = "pending"
    ACTIVE = "active"
    EXPIRED = "expired"
    CANCELLED = "cancelled"
    FAILED = "failed"


class UserRole(str, Enum):
    USER = "user"
    PHARMACY = "pharmacy"
    DOCTOR = "doctor"
    ADMIN = "admin"


WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")
