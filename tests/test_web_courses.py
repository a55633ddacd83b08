"""Tests for course, lesson, tag and upload endpoints."""

import pytest


@pytest.fixture
def tag(client):
    response = client.post("/api/tags", json={"name": "python", "color": "#10b981"})
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def course(client, tag):
    response = client.post(
        "/api/courses",
        json={
            "title": "Python 101",
            "category": "Programming",
            "topic": "Python",
            "lessons": [
                {"title": "Setup", "content_type": "text", "content_url": "Install it"},
                {"content_type": "video", "content_url": "https://youtu.be/abc"},
            ],
            "tag_ids": [tag["id"]],
        },
    )
    assert response.status_code == 201
    return response.json()


class TestCreateCourse:
    """Tests for POST /api/courses."""

    def test_create(self, course, tag):
        assert course["title"] == "Python 101"
        assert [(l["title"], l["order_index"]) for l in course["lessons"]] == [
            ("Setup", 0),
            ("Lesson 2", 1),
        ]
        assert [t["id"] for t in course["tags"]] == [tag["id"]]

    def test_blank_title(self, client):
        response = client.post("/api/courses", json={"title": " ", "lessons": []})
        assert response.status_code == 422
        data = response.json()
        assert data["detail"] == "Course title is required"
        assert data["notification"]["variant"] == "destructive"

    def test_unknown_content_type(self, client):
        response = client.post(
            "/api/courses",
            json={"title": "X", "lessons": [{"content_type": "audio"}]},
        )
        assert response.status_code == 422

    def test_book_lesson_with_missing_book(self, client):
        response = client.post(
            "/api/courses",
            json={"title": "X", "lessons": [{"content_type": "book", "book_id": "missing"}]},
        )
        assert response.status_code == 422
        assert client.get("/api/courses").json()["count"] == 0

    def test_unknown_tag(self, client):
        response = client.post("/api/courses", json={"title": "X", "tag_ids": ["missing"]})
        assert response.status_code == 404
        assert client.get("/api/courses").json()["count"] == 0


class TestCourseDetail:
    """Tests for GET/PUT/DELETE /api/courses/{id}."""

    def test_list(self, client, course):
        data = client.get("/api/courses").json()
        assert data["count"] == 1
        assert data["courses"][0]["id"] == course["id"]

    def test_get(self, client, course):
        data = client.get(f"/api/courses/{course['id']}").json()
        assert [l["title"] for l in data["lessons"]] == ["Setup", "Lesson 2"]
        assert data["tags"][0]["name"] == "python"

    def test_get_not_found(self, client):
        assert client.get("/api/courses/missing").status_code == 404

    def test_update_reorders_and_keeps_tags(self, client, course):
        response = client.put(
            f"/api/courses/{course['id']}",
            json={
                "title": "Python 102",
                "lessons": [
                    {"title": "Video", "content_type": "video"},
                    {"title": "Setup", "content_type": "text"},
                ],
            },
        )
        assert response.status_code == 200
        data = response.json()
        assert data["title"] == "Python 102"
        assert [(l["title"], l["order_index"]) for l in data["lessons"]] == [
            ("Video", 0),
            ("Setup", 1),
        ]
        assert len(data["tags"]) == 1

    def test_update_not_found(self, client):
        response = client.put("/api/courses/missing", json={"title": "X"})
        assert response.status_code == 404

    def test_delete(self, client, course):
        assert client.delete(f"/api/courses/{course['id']}").status_code == 204
        assert client.get(f"/api/courses/{course['id']}").status_code == 404
        assert client.delete(f"/api/courses/{course['id']}").status_code == 404


class TestCoursePlayer:
    """Tests for the player view and completion toggling."""

    def test_initial_state(self, client, course):
        data = client.get(f"/api/courses/{course['id']}/player").json()
        assert data["current_lesson_id"] == course["lessons"][0]["id"]
        assert [l["completed"] for l in data["lessons"]] == [False, False]
        assert data["progress"] == {"total_lessons": 2, "completed_lessons": 0, "percentage": 0.0}

    def test_toggle_complete(self, client, course):
        lesson_id = course["lessons"][0]["id"]

        response = client.post(f"/api/lessons/{lesson_id}/toggle-complete")
        assert response.status_code == 200
        data = response.json()
        assert data["completed"] is True
        assert data["progress"]["percentage"] == 50.0
        assert data["notification"]["title"] == "Lesson Complete!"

        player = client.get(f"/api/courses/{course['id']}/player").json()
        assert player["current_lesson_id"] == course["lessons"][1]["id"]
        assert player["lessons"][0]["completed"] is True

    def test_toggle_twice_uncompletes(self, client, course):
        lesson_id = course["lessons"][0]["id"]
        client.post(f"/api/lessons/{lesson_id}/toggle-complete")

        data = client.post(f"/api/lessons/{lesson_id}/toggle-complete").json()
        assert data["completed"] is False
        assert data["notification"] is None
        assert data["progress"]["completed_lessons"] == 0

    def test_all_done_resumes_at_first(self, client, course):
        for lesson in course["lessons"]:
            client.post(f"/api/lessons/{lesson['id']}/toggle-complete")
        player = client.get(f"/api/courses/{course['id']}/player").json()
        assert player["current_lesson_id"] == course["lessons"][0]["id"]
        assert player["progress"]["percentage"] == 100.0

    def test_toggle_unknown_lesson(self, client):
        response = client.post("/api/lessons/missing/toggle-complete")
        assert response.status_code == 404

    def test_lesson_notes(self, client, course):
        lesson_id = course["lessons"][1]["id"]
        response = client.put(f"/api/lessons/{lesson_id}/notes", json={"notes": "Rewatch 3:20"})
        assert response.status_code == 200
        assert response.json()["notes"] == "Rewatch 3:20"

    def test_lesson_notes_unknown_lesson(self, client):
        response = client.put("/api/lessons/missing/notes", json={"notes": "x"})
        assert response.status_code == 404


class TestTags:
    """Tests for tag endpoints."""

    def test_color_normalized(self, tag):
        assert tag["color"] == "#10B981"

    def test_default_color(self, client):
        response = client.post("/api/tags", json={"name": "math"})
        assert response.json()["color"] == "#3B82F6"

    def test_duplicate_name(self, client, tag):
        response = client.post("/api/tags", json={"name": "python"})
        assert response.status_code == 409

    def test_invalid_color(self, client):
        response = client.post("/api/tags", json={"name": "x", "color": "green"})
        assert response.status_code == 400

    def test_blank_name(self, client):
        response = client.post("/api/tags", json={"name": "   "})
        assert response.status_code == 422

    def test_list_sorted(self, client, tag):
        client.post("/api/tags", json={"name": "algorithms"})
        names = [t["name"] for t in client.get("/api/tags").json()["tags"]]
        assert names == ["algorithms", "python"]

    def test_replace_course_tags(self, client, course):
        other = client.post("/api/tags", json={"name": "beginner"}).json()
        response = client.put(f"/api/courses/{course['id']}/tags", json={"tag_ids": [other["id"]]})
        assert response.status_code == 200
        assert [t["name"] for t in response.json()["tags"]] == ["beginner"]

        data = client.get(f"/api/courses/{course['id']}/tags").json()
        assert data["count"] == 1

    def test_delete_tag_detaches(self, client, course, tag):
        assert client.delete(f"/api/tags/{tag['id']}").status_code == 204
        assert client.get(f"/api/courses/{course['id']}/tags").json()["count"] == 0
        assert client.delete(f"/api/tags/{tag['id']}").status_code == 404


class TestMediaUploads:
    """Tests for POST /api/uploads/{kind}."""

    def test_video(self, client):
        response = client.post(
            "/api/uploads/video", files={"file": ("intro.mp4", b"\x00" * 16, "video/mp4")}
        )
        assert response.status_code == 201
        data = response.json()
        assert data["kind"] == "video"
        assert "/storage/course-videos/videos/" in data["url"]

    def test_image_wrong_type(self, client):
        response = client.post(
            "/api/uploads/image", files={"file": ("intro.mp4", b"\x00", "video/mp4")}
        )
        assert response.status_code == 400
        assert response.json()["notification"]["title"] == "Upload failed"

    def test_unknown_kind(self, client):
        response = client.post(
            "/api/uploads/audio", files={"file": ("a.mp3", b"\x00", "audio/mpeg")}
        )
        assert response.status_code == 400
