import pytest

from conftest import auth_header, make_class, make_user


@pytest.fixture
def priced_classes(db):
    make_class(db, title="Cclass", price=30, enrolled=5, availableSeats=1)
    make_class(db, title="Aclass", price=10, enrolled=20, availableSeats=7)
    make_class(db, title="Bclass", price=20, enrolled=1, availableSeats=3)


def test_list_classes_empty(client):
    response = client.get("/classes")
    assert response.status_code == 200
    assert response.json() == []


def test_list_classes_exposes_mongo_id(client, db):
    class_id = make_class(db)
    data = client.get("/classes").json()
    assert data[0]["_id"] == class_id
    assert data[0]["instructor"]["uid"] == "instructor1"


def test_list_classes_quantity(client, priced_classes):
    response = client.get("/classes?quantity=2")
    assert response.status_code == 200
    assert len(response.json()) == 2


def test_price_low_to_high_with_quantity(client, priced_classes):
    """prices [30, 10, 20], quantity=2 -> [10, 20]"""
    response = client.get("/classes", params={"quantity": 2, "filter": "Sort by price low to high"})
    assert response.status_code == 200
    assert [c["price"] for c in response.json()] == [10, 20]


@pytest.mark.parametrize("sort, field, expected", [
    ("Sort by price high to low", "price", [30, 20, 10]),
    ("Sort by name A to Z", "title", ["Aclass", "Bclass", "Cclass"]),
    ("Sort by name Z to A", "title", ["Cclass", "Bclass", "Aclass"]),
    ("Sort by popularity high to low", "enrolled", [20, 5, 1]),
    ("Sort by popularity low to high", "enrolled", [1, 5, 20]),
    ("Sort by availability low to high", "availableSeats", [1, 3, 7]),
    ("Sort by availability high to low", "availableSeats", [7, 3, 1]),
])
def test_list_classes_sorted(client, priced_classes, sort, field, expected):
    response = client.get("/classes", params={"filter": sort})
    assert response.status_code == 200
    assert [c[field] for c in response.json()] == expected


def test_list_classes_unknown_filter(client):
    response = client.get("/classes", params={"filter": "Sort by vibes"})
    assert response.status_code == 422


def test_list_classes_invalid_quantity(client):
    assert client.get("/classes?quantity=0").status_code == 422
    assert client.get("/classes?quantity=abc").status_code == 422


def test_list_instructors(client, db):
    make_user(db, "instructor1", role="instructor")
    make_user(db, "instructor2", role="instructor")
    make_user(db, "student1")
    response = client.get("/instructors")
    assert response.status_code == 200
    assert sorted(u["uid"] for u in response.json()) == ["instructor1", "instructor2"]


def test_instructor_student_count(client, db):
    make_class(db, instructor="instructor1", enrolled=4)
    make_class(db, instructor="instructor1", enrolled=6)
    make_class(db, instructor="instructor2", enrolled=100)
    response = client.get("/instructors/students/count/instructor1")
    assert response.status_code == 200
    assert response.json() == 10


def test_instructor_student_count_without_classes(client):
    assert client.get("/instructors/students/count/nobody").json() == 0


def test_instructor_classes(client, db):
    make_class(db, title="Mine", instructor="instructor1")
    make_class(db, title="Theirs", instructor="instructor2")
    data = client.get("/instructors/classes/instructor1").json()
    assert [c["title"] for c in data] == ["Mine"]


def test_my_classes_requires_instructor(client, db):
    make_user(db, "instructor1", role="instructor")
    make_user(db, "student1")
    make_class(db, title="Mine", instructor="instructor1")

    response = client.get("/instructor/my_classes", headers=auth_header("instructor1"))
    assert response.status_code == 200
    assert [c["title"] for c in response.json()] == ["Mine"]

    assert client.get("/instructor/my_classes", headers=auth_header("student1")).status_code == 403
