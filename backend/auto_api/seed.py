"""
Seed data for development and testing.
Creates a small set of demo Autos with engines and repairs.
"""

from datetime import date
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session

from auto_api.models import Auto, Engine, Repair
from shared.config.constants import AutoCategory
from shared.config.logging import get_logger

logger = get_logger(__name__)


DEMO_AUTOS = [
    {
        "chassis_number": "WVWZZZ1JZXW000001",
        "make": "VW",
        "model": "Golf",
        "model_year": 2019,
        "category": AutoCategory.KOMBI,
        "price": Decimal("24990.00"),
        "safety_features": ["ABS", "AIRBAG", "ESB"],
        "engine": {"name": "Alpha", "horsepower": 110, "cylinders": 4, "rated_speed": Decimal("6000")},
        "repairs": [
            {"cost": Decimal("349.90"), "mechanic": "Hans Müller", "date": date(2022, 3, 14)},
        ],
    },
    {
        "chassis_number": "WVWZZZ1JZXW000002",
        "make": "VW",
        "model": "Passat",
        "model_year": 2020,
        "category": AutoCategory.KOMBI,
        "price": Decimal("32500.00"),
        "safety_features": ["ABS", "AIRBAG", "PARKASSISTENT"],
        "engine": {"name": "Delta", "horsepower": 190, "cylinders": 4, "rated_speed": Decimal("4200.5")},
        "repairs": [
            {"cost": Decimal("120.00"), "mechanic": "Jörg Schäfer", "date": date(2021, 11, 2)},
            {"cost": Decimal("899.00"), "mechanic": "Anna-Lena Groß", "date": date(2023, 6, 30)},
        ],
    },
    {
        "chassis_number": "WBA00000000000003",
        "make": "BMW",
        "model": "X5",
        "model_year": 2018,
        "category": AutoCategory.SUV,
        "price": Decimal("54900.00"),
        "safety_features": ["ABS", "AIRBAG"],
        "engine": {"name": "Gamma", "horsepower": 340, "cylinders": 6, "rated_speed": Decimal("5500")},
        "repairs": [],
    },
    {
        "chassis_number": "WDB00000000000004",
        "make": "Mercedes",
        "model": "C-Klasse",
        "model_year": 2021,
        "category": AutoCategory.LIMOUSINE,
        "price": Decimal("45800.00"),
        "safety_features": ["ESB", "AIRBAG"],
        "engine": {"name": "Epsilon", "horsepower": 204, "cylinders": 4, "rated_speed": Decimal("6100")},
        "repairs": [
            {"cost": Decimal("75.50"), "mechanic": "Karl Özdemir", "date": date(2023, 1, 9)},
        ],
    },
    {
        "chassis_number": "VF100000000000005",
        "make": "Renault",
        "model": "Clio",
        "model_year": 2017,
        "category": AutoCategory.LIMOUSINE,
        "price": Decimal("9990.00"),
        "safety_features": ["ABS"],
        "engine": {"name": "Omega", "horsepower": 90, "cylinders": 4, "rated_speed": Decimal("5000")},
        "repairs": [],
    },
]


def build_auto(data: dict) -> Auto:
    """Build a transient Auto aggregate from a seed record."""
    auto = Auto(
        chassis_number=data["chassis_number"],
        make=data["make"],
        model=data["model"],
        model_year=data["model_year"],
        category=data["category"],
        price=data["price"],
    )
    auto.safety_feature_list = data["safety_features"]
    auto.engine = Engine(**data["engine"])
    auto.repairs = [Repair(**r) for r in data["repairs"]]
    return auto


def seed(db: Session) -> None:
    """
    Insert the demo Autos.
    Idempotent: only inserts if no Auto exists yet.
    """
    if db.scalar(select(Auto.id).limit(1)):
        logger.info("Autos already seeded, skipping")
        return

    db.add_all([build_auto(data) for data in DEMO_AUTOS])
    db.commit()
    logger.info("Demo Autos seeded", count=len(DEMO_AUTOS))
