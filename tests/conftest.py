"""Shared fixtures: ephemeris facade, observers, synthetic catalogs."""

import pytest

from skyephem import EventFinder, JupiterInfo, MinorBodies, SkyObserver, SolarSystem


# ═══════════════════════════════════════════════════════════════════════════
#  Facade & Observers
# ═══════════════════════════════════════════════════════════════════════════

@pytest.fixture(scope="session")
def solar_system():
    return SolarSystem()


@pytest.fixture(scope="session")
def finder(solar_system):
    return EventFinder(solar_system=solar_system)


@pytest.fixture
def greenwich(solar_system):
    return SkyObserver(0.0, 51.4779, 46.0, solar_system=solar_system)


@pytest.fixture
def tromso(solar_system):
    return SkyObserver(18.9553, 69.6492, 0.0, solar_system=solar_system)


@pytest.fixture
def palomar():
    # Meeus Example 11.a
    return SkyObserver(-116.8625, 33.356111, 1706.0)


# ═══════════════════════════════════════════════════════════════════════════
#  Minor Bodies
# ═══════════════════════════════════════════════════════════════════════════

CERES_TP = 2_458_849.5

@pytest.fixture
def asteroid_records():
    return [
        {
            "body": {"designation": "A801 AA", "name": "Ceres (A801 AA)", "H": 3.34, "G": 0.12},
            "elements": [
                {"epoch": "2020-07-01", "q": 2.55, "e": 0.08, "i": 10.6,
                 "w": 73.6, "L": 80.3, "Tp": CERES_TP + 40.0},
                {"epoch": "2020-01-01", "q": 2.54, "e": 0.07, "i": 10.59,
                 "w": 73.5, "L": 80.3, "Tp": CERES_TP},
            ],
        },
        {
            "body": {"designation": "A802 FA", "name": "Pallas", "H": 4.13, "G": 0.11},
            "elements": [
                {"epoch": 2_458_849.5, "q": 2.13, "e": 0.23, "i": 34.8,
                 "w": 310.0, "L": 173.1, "Tp": 2_458_700.0},
            ],
        },
    ]


@pytest.fixture
def comet_records():
    return [
        {
            "body": {"designation": "1P", "name": "1P/Halley"},
            "elements": [
                {"epoch": "1986-02-19", "q": 0.5871, "e": 0.9673, "i": 162.24,
                 "w": 111.85, "L": 58.15, "Tp": 2_446_470.95},
            ],
        },
    ]


@pytest.fixture
def minor_bodies(asteroid_records, comet_records):
    bodies = MinorBodies()
    assert bodies.load(asteroid_records, comet_records)
    return bodies


# ═══════════════════════════════════════════════════════════════════════════
#  Great Red Spot
# ═══════════════════════════════════════════════════════════════════════════

GRS_TEXT = """15.0
15.0
90
2020-01-01,330.0
2020-07-01,335.0
2021-01-01,340.0
"""

@pytest.fixture
def grs_text():
    return GRS_TEXT


@pytest.fixture
def jupiter_info(grs_text):
    info = JupiterInfo()
    assert info.load(grs_text)
    return info
