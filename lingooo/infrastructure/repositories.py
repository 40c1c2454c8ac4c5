from dataclasses import asdict
from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ASCENDING, DESCENDING
from pymongo.database import Database
from ..domain.entities import Class, Flag, InstructorRef, Review, Role, User
from ..application.dto import RegisterUserInput
from ..application.use_cases.register_user import IUserRepository
from ..application.use_cases.enroll_class import IClassRepository, IEnrollmentRepository

# Query value of ``filter`` on GET /classes -> (field, direction)
CLASS_SORTS: dict[str, tuple[str, int]] = {
    "Sort by name A to Z": ("title", ASCENDING),
    "Sort by name Z to A": ("title", DESCENDING),
    "Sort by price low to high": ("price", ASCENDING),
    "Sort by price high to low": ("price", DESCENDING),
    "Sort by popularity low to high": ("enrolled", ASCENDING),
    "Sort by popularity high to low": ("enrolled", DESCENDING),
    "Sort by availability low to high": ("availableSeats", ASCENDING),
    "Sort by availability high to low": ("availableSeats", DESCENDING),
}


def to_object_id(value: str) -> ObjectId | None:
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


def class_to_domain(doc: dict) -> Class:
    instructor = doc.get("instructor") or None
    return Class(
        id=str(doc["_id"]),
        title=doc.get("title", ""),
        price=doc.get("price", 0),
        language=doc.get("language"),
        enrolled=doc.get("enrolled", 0),
        availableSeats=doc.get("availableSeats", 0),
        image=doc.get("image"),
        instructor=InstructorRef(
            uid=instructor.get("uid", ""),
            name=instructor.get("name"),
            email=instructor.get("email"),
            photoURL=instructor.get("photoURL"),
        ) if instructor else None,
    )


def user_to_domain(doc: dict) -> User:
    return User(
        uid=doc["uid"],
        displayName=doc.get("displayName"),
        photoURL=doc.get("photoURL"),
        email=doc.get("email"),
        role=doc.get("role", Role.STUDENT.value),
        selectedClasses=list(doc.get("selectedClasses", [])),
        enrolledClasses=list(doc.get("enrolledClasses", [])),
        reviews=list(doc.get("reviews", [])),
    )


class ClassRepository(IClassRepository):
    def __init__(self, db: Database): self.col = db.classes

    def find_all(self, quantity: int | None = None, sort: str | None = None) -> list[Class]:
        cursor = self.col.find()
        if sort:
            field, direction = CLASS_SORTS[sort]
            cursor = cursor.sort(field, direction)
        if quantity:
            cursor = cursor.limit(quantity)
        return [class_to_domain(d) for d in cursor]

    def get(self, class_id: str) -> Class | None:
        oid = to_object_id(class_id)
        if oid is None:
            return None
        doc = self.col.find_one({"_id": oid})
        return class_to_domain(doc) if doc else None

    def get_many(self, class_ids: list[str]) -> list[Class]:
        """Resolve ids in one query, keeping the order of ``class_ids``.

        Ids that are malformed or match no class are dropped.
        """
        oids = [oid for oid in map(to_object_id, class_ids) if oid is not None]
        if not oids:
            return []
        found = {str(d["_id"]): d for d in self.col.find({"_id": {"$in": oids}})}
        return [class_to_domain(found[cid]) for cid in class_ids if cid in found]

    def by_instructor(self, uid: str) -> list[Class]:
        return [class_to_domain(d) for d in self.col.find({"instructor.uid": uid})]

    def total_students(self, uid: str) -> int:
        rows = list(self.col.aggregate([
            {"$match": {"instructor.uid": uid}},
            {"$group": {"_id": None, "total": {"$sum": "$enrolled"}}},
        ]))
        return int(rows[0]["total"]) if rows else 0

    def languages_for_instructor(self, uid: str) -> list[str]:
        rows = self.col.aggregate([
            {"$match": {"instructor.uid": uid, "language": {"$ne": None}}},
            {"$group": {"_id": "$language"}},
            {"$sort": {"_id": ASCENDING}},
        ])
        return [r["_id"] for r in rows]

    def take_seat(self, class_id: str) -> bool:
        res = self.col.update_one(
            {"_id": to_object_id(class_id), "availableSeats": {"$gt": 0}},
            {"$inc": {"availableSeats": -1, "enrolled": 1}},
        )
        return res.matched_count == 1

    def release_seat(self, class_id: str) -> None:
        self.col.update_one(
            {"_id": to_object_id(class_id)},
            {"$inc": {"availableSeats": 1, "enrolled": -1}},
        )


class UserRepository(IUserRepository, IEnrollmentRepository):
    def __init__(self, db: Database): self.col = db.users

    def get_by_uid(self, uid: str) -> User | None:
        doc = self.col.find_one({"uid": uid})
        return user_to_domain(doc) if doc else None

    def get_role(self, uid: str) -> str | None:
        doc = self.col.find_one({"uid": uid}, {"role": 1})
        return doc.get("role", Role.STUDENT.value) if doc else None

    def create(self, data: RegisterUserInput, role: str = Role.STUDENT.value) -> User:
        doc = {
            "uid": data.uid,
            "displayName": data.displayName,
            "photoURL": data.photoURL,
            "email": data.email,
            "role": role,
            "selectedClasses": [],
            "enrolledClasses": [],
            "reviews": [],
        }
        self.col.insert_one(doc)
        return user_to_domain(doc)

    def list_all(self) -> list[User]:
        return [user_to_domain(d) for d in self.col.find()]

    def list_by_role(self, role: str) -> list[User]:
        return [user_to_domain(d) for d in self.col.find({"role": role})]

    def set_role(self, uid: str, role: str) -> bool:
        res = self.col.update_one({"uid": uid}, {"$set": {"role": role}})
        return res.matched_count == 1

    def add_selected_class(self, uid: str, class_id: str) -> bool:
        """False when the class was already selected."""
        res = self.col.update_one(
            {"uid": uid, "selectedClasses": {"$ne": class_id}},
            {"$addToSet": {"selectedClasses": class_id}},
        )
        return res.matched_count == 1

    def remove_selected_class(self, uid: str, class_id: str) -> bool:
        """False when the class was not in the selection."""
        res = self.col.update_one(
            {"uid": uid, "selectedClasses": class_id},
            {"$pull": {"selectedClasses": class_id}},
        )
        return res.matched_count == 1

    def enroll(self, uid: str, class_id: str) -> bool:
        res = self.col.update_one(
            {"uid": uid, "enrolledClasses": {"$ne": class_id}},
            {"$addToSet": {"enrolledClasses": class_id}, "$pull": {"selectedClasses": class_id}},
        )
        return res.matched_count == 1

    def student_reviews(self) -> list[dict]:
        return list(self.col.aggregate([
            {"$match": {"role": Role.STUDENT.value}},
            {"$unwind": "$reviews"},
            {"$project": {"_id": 0, "displayName": 1, "photoURL": 1, "review": "$reviews"}},
        ]))

    def reviews_of(self, uid: str) -> list | None:
        doc = self.col.find_one({"uid": uid}, {"reviews": 1})
        if doc is None:
            return None
        return list(doc.get("reviews", []))

    def add_review(self, uid: str, review: Review) -> bool:
        res = self.col.update_one({"uid": uid}, {"$push": {"reviews": asdict(review)}})
        return res.matched_count == 1


class FlagRepository:
    def __init__(self, db: Database): self.col = db.flags

    def by_name(self, name: str) -> Flag | None:
        doc = self.col.find_one({"name": name})
        return Flag(name=doc["name"], image=doc.get("image", "")) if doc else None

    def images_for_languages(self, languages: list[str], limit: int = 2) -> list[str]:
        if not languages:
            return []
        cursor = self.col.find({"name": {"$in": languages}}, {"_id": 0, "image": 1}).limit(limit)
        return [d["image"] for d in cursor if "image" in d]
