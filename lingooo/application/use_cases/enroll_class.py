from ...domain.entities import Class, User
from ..dto import EnrollClassInput

class ClassNotFound(LookupError):
    pass

class EnrollmentRejected(ValueError):
    pass

class StudentNotFound(LookupError):
    pass

class IClassRepository:
    def get(self, class_id: str) -> Class | None: ...
    def take_seat(self, class_id: str) -> bool: ...
    def release_seat(self, class_id: str) -> None: ...

class IEnrollmentRepository:
    def get_by_uid(self, uid: str) -> User | None: ...
    def enroll(self, uid: str, class_id: str) -> bool: ...

class EnrollClass:
    """Move a paid-for class from the student's selection into enrollments.

    The seat is taken first with a conditional update; if the student turns
    out to be enrolled already the seat is handed back.
    """

    def __init__(self, users: IEnrollmentRepository, classes: IClassRepository):
        self.users = users
        self.classes = classes

    def execute(self, data: EnrollClassInput) -> Class:
        cls = self.classes.get(data.class_id)
        if cls is None:
            raise ClassNotFound("Class not found")
        user = self.users.get_by_uid(data.uid)
        if user is None:
            raise StudentNotFound("User not found")
        if data.class_id in user.enrolledClasses:
            raise EnrollmentRejected("Already enrolled in this class")
        if not self.classes.take_seat(data.class_id):
            raise EnrollmentRejected("No seats available")
        if not self.users.enroll(data.uid, data.class_id):
            self.classes.release_seat(data.class_id)
            # no match either means a concurrent enrollment or a deleted user
            if self.users.get_by_uid(data.uid) is None:
                raise StudentNotFound("User not found")
            raise EnrollmentRejected("Already enrolled in this class")
        return cls
