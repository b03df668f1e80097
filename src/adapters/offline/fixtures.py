"""Datos estáticos del modo offline.

Registros en forma de cable (camelCase), igual que los devolvería el
backend. `build_fixtures()` genera una copia nueva en cada llamada: el
estado offline se reinicia con el proceso (o con `FixtureStore.reset`).
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

Record = dict[str, Any]

_TOPICS = ("React", "Node.js", "Python", "Design", "Marketing")
_INSTRUCTORS = ("John Doe", "Jane Smith", "Mike Johnson", "Sarah Wilson", "David Brown")
_DIFFICULTIES = ("Beginner", "Intermediate", "Advanced")
_EPOCH = datetime(2024, 1, 1, tzinfo=timezone.utc)

COURSE_FIXTURE_SIZE = 25


def _stamp(days: int) -> str:
    return (_EPOCH + timedelta(days=days)).isoformat().replace("+00:00", "Z")


def _courses() -> list[Record]:
    out: list[Record] = []
    for i in range(COURSE_FIXTURE_SIZE):
        topic = _TOPICS[i % 5]
        out.append(
            {
                "id": i + 1,
                "title": f"Course {i + 1}: {topic} Masterclass",
                "description": f"This is a comprehensive course about {topic}. Learn from experts.",
                "instructor": _INSTRUCTORS[i % 5],
                "difficulty": _DIFFICULTIES[i % 3],
                "durationHours": 10 + i * 2,
                "price": round(49.99 + i * 10, 2),
                "rating": round(3.5 + (i % 15) / 10, 1),
                "isActive": i % 5 != 0,
                "categoryId": (i % 5) + 1,
                "thumbnailUrl": f"https://source.unsplash.com/random/800x600?sig={i}",
                "createdAt": _stamp(i),
                "updatedAt": _stamp(i),
            }
        )
    return out


def _videos() -> list[Record]:
    base = {"courseId": 1, "createdAt": _stamp(0), "updatedAt": _stamp(0)}
    return [
        {
            **base,
            "id": 1,
            "title": "Introduction to React Native",
            "description": 'Getting started with the environment setup and "Hello World".',
            "videoUrl": "https://www.youtube.com/watch?v=ysz5S6PUM-U",
            "duration": 1200,
            "orderIndex": 1,
            "thumbnailUrl": "https://img.youtube.com/vi/ysz5S6PUM-U/maxresdefault.jpg",
            "isPreview": True,
        },
        {
            **base,
            "id": 2,
            "title": "Components and Props",
            "description": "Understanding functional components, props, and basic styling.",
            "videoUrl": "https://www.youtube.com/watch?v=LXb3EKWsInQ",
            "duration": 1500,
            "orderIndex": 2,
            "thumbnailUrl": "https://img.youtube.com/vi/LXb3EKWsInQ/maxresdefault.jpg",
            "isPreview": False,
        },
        {
            **base,
            "id": 3,
            "title": "State Management with Hooks",
            "description": "Using useState and useEffect hooks effectively.",
            "videoUrl": "https://www.youtube.com/watch?v=9bZkp7q19f0",
            "duration": 1800,
            "orderIndex": 3,
            "thumbnailUrl": "https://img.youtube.com/vi/9bZkp7q19f0/maxresdefault.jpg",
            "isPreview": False,
        },
    ]


def _documents() -> list[Record]:
    return [
        {"id": 1, "courseId": 1, "fileName": "Course_Syllabus.pdf", "fileUrl": "/documents/syllabus.pdf",
         "fileSize": 2048576, "uploadedAt": "2024-01-15T10:00:00Z", "uploadedBy": "John Doe"},
        {"id": 2, "courseId": 1, "fileName": "Cheatsheet.pdf", "fileUrl": "/documents/cheatsheet.pdf",
         "fileSize": 1024000, "uploadedAt": "2024-01-16T10:00:00Z", "uploadedBy": "John Doe"},
        {"id": 3, "courseId": 1, "fileName": "Project_Assets.zip", "fileUrl": "/documents/assets.zip",
         "fileSize": 5242880, "uploadedAt": "2024-01-17T10:00:00Z", "uploadedBy": "John Doe"},
    ]


def _course_enrollments() -> list[Record]:
    people = (
        (101, "student1", "Alice", "Johnson", "2024-01-10T00:00:00Z", 45, "active"),
        (102, "student2", "Bob", "Smith", "2024-01-12T00:00:00Z", 100, "completed"),
        (103, "student3", "Charlie", "Brown", "2024-01-15T00:00:00Z", 10, "active"),
    )
    return [
        {
            "id": n,
            "userId": uid,
            "courseId": 1,
            "enrolledAt": enrolled,
            "progress": progress,
            "status": status,
            "user": {
                "id": uid,
                "username": username,
                "email": f"{username}@example.com",
                "firstName": first,
                "lastName": last,
                "avatarUrl": f"https://i.pravatar.cc/150?u={username}",
            },
        }
        for n, (uid, username, first, last, enrolled, progress, status) in enumerate(people, start=1)
    ]


def _categories() -> list[Record]:
    names = ("Web Development", "Mobile Development", "Data Science", "Design", "Business")
    return [{"id": i, "categoryName": name} for i, name in enumerate(names, start=1)]


def _roles() -> list[Record]:
    return [
        {"id": 1, "roleName": "Admin", "createdAt": _stamp(0), "permissions": []},
        {"id": 2, "roleName": "Instructor", "createdAt": _stamp(1), "permissions": []},
        {"id": 3, "roleName": "Student", "createdAt": _stamp(2), "permissions": []},
    ]


def _groups() -> list[Record]:
    return [
        {"id": 1, "groupName": "Computer Science Batch A", "createdAt": _stamp(10)},
        {"id": 2, "groupName": "Data Science Bootcamp", "createdAt": _stamp(11)},
    ]


def _group_courses() -> list[Record]:
    rows: list[Record] = []
    for group_id in (1, 2):
        rows.append({"groupId": group_id, "courseId": 1, "isEnable": True, "courseName": "Introduction to React"})
        rows.append({"groupId": group_id, "courseId": 2, "isEnable": False, "courseName": "Advanced TypeScript"})
    return rows


def _enrolled_courses() -> list[Record]:
    specs = (
        (101, "React Masterclass", "Learn React from scratch", "John Doe", "Intermediate", 20, 49.99, 4.5,
         "2025-01-01T10:00:00Z", None, 10, "Active"),
        (102, "Advanced Python", "Master Python features", "Jane Smith", "Advanced", 30, 59.99, 4.8,
         "2024-12-15T10:00:00Z", "2025-01-10T15:30:00Z", 100, "Completed"),
        (103, "UI/UX Design Fundamentals", "Create beautiful user interfaces", "Mike Johnson", "Beginner", 15,
         39.99, 4.7, "2025-01-05T09:00:00Z", None, 45, "Active"),
        (104, "Docker & Kubernetes", "Containerization mastery", "Sarah Lee", "Advanced", 40, 89.99, 4.9,
         "2024-11-20T10:00:00Z", "2025-01-15T10:00:00Z", 100, "Completed"),
        (105, "Machine Learning Basics", "Intro to AI and ML", "David Kim", "Intermediate", 25, 69.99, 4.6,
         "2025-01-10T12:00:00Z", None, 5, "Active"),
    )
    out: list[Record] = []
    for n, (course_id, title, desc, instr, diff, hours, price, rating, enrolled, completed, progress, status) in enumerate(
        specs, start=1
    ):
        record: Record = {
            "id": n,
            "userId": 1,
            "courseId": course_id,
            "enrolledAt": enrolled,
            "progress": progress,
            "status": status,
            "course": {
                "id": course_id,
                "title": title,
                "description": desc,
                "instructor": instr,
                "difficulty": diff,
                "durationHours": hours,
                "price": price,
                "rating": rating,
            },
        }
        if completed:
            record["completedAt"] = completed
        out.append(record)
    return out


def build_fixtures() -> dict[str, list[Record]]:
    """Colecciones offline, indexadas por nombre de recurso."""

    return {
        "course": _courses(),
        "course_video": _videos(),
        "course_document": _documents(),
        "course_enrollment": _course_enrollments(),
        "category": _categories(),
        "role": _roles(),
        "group": _groups(),
        "group_course": _group_courses(),
        "enrolled_course": _enrolled_courses(),
    }
