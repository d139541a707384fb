"""Shared fixtures: the four address records and a seeded database."""

from __future__ import annotations

import copy

import pytest

from bumbledb import Database, open_database

ADDRESSES = [
    {
        "id": 1,
        "email": "elizabeth.beason@superrito.com",
        "firstName": "Elizabeth",
        "lastName": "Beason",
        "address": {
            "street": "Hunterfly Place",
            "houseNumber": "18",
            "zipCode": "15490",
            "city": "Belva",
            "state": "Colorado",
            "country": "Pakistan",
        },
    },
    {
        "id": 2,
        "email": "amanda.cross@einrot.com",
        "firstName": "Amanda",
        "lastName": "Cross",
        "address": {
            "street": "Pulaski Street",
            "houseNumber": "120",
            "zipCode": "23916",
            "city": "Limestone",
            "state": "South Carolina",
            "country": "Cayman Islands",
        },
    },
    {
        "id": 3,
        "email": "amanda.taylor@gustr.com",
        "firstName": "Amanda",
        "lastName": "Taylor",
        "address": {
            "street": "Macon Street",
            "houseNumber": "197",
            "zipCode": "93138",
            "city": "Haena",
            "state": "Iowa",
            "country": "Croatia (Hrvatska)",
        },
    },
    {
        "id": 4,
        "email": "richard.mcdowell@dayrep.com",
        "firstName": "Richard",
        "lastName": "McDowell",
        "address": {
            "street": "Hoyts Lane",
            "houseNumber": "95",
            "zipCode": "39330",
            "city": "Bordelonville",
            "state": "Oregon",
            "country": "Cayman Islands",
        },
    },
]


@pytest.fixture
def addresses() -> list[dict]:
    return copy.deepcopy(ADDRESSES)


@pytest.fixture
def db(tmp_path) -> Database:
    return open_database(tmp_path / "data")


@pytest.fixture
def seeded(db, addresses) -> Database:
    db.collection("test").insert_many(addresses)
    return db
