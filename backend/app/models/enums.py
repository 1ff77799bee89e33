"""
Car listing enumerations.

Closed value sets for listing attributes. Values are stored and sent
exactly as written here.
"""

import enum


class Transmission(str, enum.Enum):
    AUTOMATIC = "Automatic"
    MANUAL = "Manual"
    CVT = "CVT"
    SEMI_AUTOMATIC = "Semi-Automatic"


class Condition(str, enum.Enum):
    NEW = "New"
    USED = "Used"
    CERTIFIED_PRE_OWNED = "Certified Pre-Owned"


class FuelType(str, enum.Enum):
    PETROL = "Petrol"
    DIESEL = "Diesel"
    ELECTRIC = "Electric"
    HYBRID = "Hybrid"
    CNG = "CNG"
    LPG = "LPG"


class BodyType(str, enum.Enum):
    SEDAN = "Sedan"
    SUV = "SUV"
    HATCHBACK = "Hatchback"
    COUPE = "Coupe"
    CONVERTIBLE = "Convertible"
    WAGON = "Wagon"
    VAN = "Van"
    TRUCK = "Truck"


class CarStatus(str, enum.Enum):
    """
    Listing status.

    Only AVAILABLE listings are shown in the default public view.
    """
    AVAILABLE = "Available"
    SOLD = "Sold"
    RESERVED = "Reserved"
