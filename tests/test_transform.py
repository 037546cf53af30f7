import pytest

from roster_sync.etl import transform
from roster_sync.models import Company, Driver


def test_normalize_drops_undated_records():
    raw = [
        {"firstName": "A", "updatedAt": "2024-01-01"},
        {"firstName": "B"},
        {"firstName": "C", "updatedAt": ""},
        {"firstName": "D", "updatedAt": None},
        "not a record",
    ]

    drivers = transform.normalize_drivers(raw)

    assert [d.first_name for d in drivers] == ["A"]


@pytest.mark.parametrize("key", ["firstName", "firstname", "first_name"])
def test_first_name_variants(key):
    (driver,) = transform.normalize_drivers([{key: "A", "updatedAt": "2024-01-01"}])
    assert driver.first_name == "A"


@pytest.mark.parametrize("key", ["lastName", "lastname", "last_name"])
def test_last_name_variants(key):
    (driver,) = transform.normalize_drivers([{key: "Z", "updatedAt": "2024-01-01"}])
    assert driver.last_name == "Z"


def test_name_resolution_prefers_camel_case_and_keeps_empty_strings():
    (driver,) = transform.normalize_drivers(
        [{"firstName": "", "firstname": "x", "lastname": None, "last_name": "Y", "updatedAt": "t"}]
    )
    assert driver.first_name == ""
    assert driver.last_name == "Y"


def test_id_resolution():
    drivers = transform.normalize_drivers(
        [
            {"_id": "abc", "id": "ignored", "updatedAt": "t"},
            {"id": "def", "updatedAt": "t"},
            {"updatedAt": "t"},
        ]
    )
    assert [d.id for d in drivers] == ["abc", "def", None]


@pytest.mark.parametrize(
    "value, expected",
    [(True, True), (False, False), ("yes", True), (1, True), (0, False), ("", False), (None, False)],
)
def test_active_coercion(value, expected):
    (driver,) = transform.normalize_drivers([{"active": value, "updatedAt": "t"}])
    assert driver.active is expected


def test_normalize_preserves_order():
    raw = [{"_id": str(i), "updatedAt": "t"} for i in range(5)]
    assert [d.id for d in transform.normalize_drivers(raw)] == ["0", "1", "2", "3", "4"]


def test_normalize_is_idempotent_on_its_output():
    raw = [
        {"firstname": "A", "last_name": "B", "_id": "1", "active": "yes", "updatedAt": "2024-01-01"},
        {"first_name": "C", "updatedAt": "2024-02-01"},
        {"firstName": "gone"},
    ]
    once = transform.normalize_drivers(raw)
    twice = transform.normalize_drivers([d.to_json() for d in once])
    assert twice == once


def test_acme_scenario_driver_shape():
    (driver,) = transform.normalize_drivers([{"firstName": "Jo", "updatedAt": "2024-01-01", "active": "yes"}])
    assert driver == Driver(first_name="Jo", last_name=None, id=None, active=True, updated_at="2024-01-01")
    assert driver.to_json() == {
        "firstName": "Jo",
        "lastName": None,
        "id": None,
        "active": True,
        "updatedAt": "2024-01-01",
    }


def test_resolve_company_fallbacks():
    assert transform.resolve_company({"companyId": 1, "name": "Acme"}) == Company(1, "Acme")
    assert transform.resolve_company({"id": "x", "companyName": "Beta"}) == Company("x", "Beta")
    assert transform.resolve_company({"company_id": 3, "company_name": "Gamma"}) == Company(3, "Gamma")
    assert transform.resolve_company({"companyId": 4, "name": ""}) == Company(4, None)
    assert transform.resolve_company({"companyId": 0}) == Company(0, None)


@pytest.mark.parametrize("raw", [{}, {"companyId": None}, {"companyId": ""}, {"name": "NoId"}, "bad", None])
def test_resolve_company_without_id(raw):
    assert transform.resolve_company(raw) is None


def test_filter_companies_drops_test_prefix():
    payload = {
        "data": [
            {"companyId": 1, "name": "Acme", "extra": True},
            {"companyId": 2, "name": "Zzz-Test"},
            {"companyId": 3, "name": "zzztop"},
            {"companyId": 4, "name": None},
        ]
    }
    assert transform.filter_companies(payload) == [
        {"companyId": 1, "name": "Acme"},
        {"companyId": 4, "name": None},
    ]


@pytest.mark.parametrize("payload", [[], {}, {"data": {}}, None])
def test_filter_companies_rejects_bad_structure(payload):
    with pytest.raises(transform.MalformedInputError):
        transform.filter_companies(payload)


def test_filter_inactive_drivers():
    companies = [
        {
            "eldPlatform": "HERO",
            "companyId": 1,
            "name": "Acme",
            "drivers": [{"id": "a", "active": True}, {"id": "b", "active": False}, {"id": "c", "active": "yes"}],
        },
        {"companyId": 2, "name": "Down", "drivers": [], "error": "boom"},
    ]

    filtered = transform.filter_inactive_drivers(companies)

    assert filtered[0]["drivers"] == [{"id": "a", "active": True}]
    assert filtered[0]["eldPlatform"] == "HERO"
    assert filtered[1] == companies[1]
    assert len(companies[0]["drivers"]) == 3
