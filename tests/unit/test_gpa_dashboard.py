"""
Tests for GPA and dashboard statistics
"""
import pytest


@pytest.fixture
def scenario(add_result):
    """Three results across two students"""
    return [
        add_result("2025IT01", "Math", 85),
        add_result("2025IT01", "Sci", 72),
        add_result("2025IT02", "ICT", 61),
    ]


class TestGPA:
    def test_gpa_for_student(self, client, scenario):
        response = client.get("/api/gpa/2025IT01")
        assert response.status_code == 200
        data = response.json()
        assert data["regno"] == "2025IT01"
        assert data["gpa"] == "3.50"
        assert data["totalSubjects"] == 2
        assert data["gradePoints"] == [
            {"subject": "Math", "marks": 85, "grade": "A+", "point": 4.0},
            {"subject": "Sci", "marks": 72, "grade": "B", "point": 3.0},
        ]

    def test_gpa_lookup_is_case_insensitive(self, client, scenario):
        data = client.get("/api/gpa/2025it02").json()
        assert data["gpa"] == "2.00"
        assert data["totalSubjects"] == 1

    def test_gpa_unknown_student(self, client):
        response = client.get("/api/gpa/NOPE")
        assert response.status_code == 404
        assert response.json()["regno"] == "NOPE"

    def test_gpa_uses_current_marks_after_update(self, client, scenario):
        client.patch(f"/api/results/{scenario[1]['id']}", json={"marks": 30})
        data = client.get("/api/gpa/2025IT01").json()
        assert data["gpa"] == "2.00"
        # the stored grade still reflects the original marks
        assert data["gradePoints"][1] == {"subject": "Sci", "marks": 30, "grade": "B", "point": 0.0}


class TestDashboard:
    def test_empty_store(self, client):
        data = client.get("/api/dashboard").json()
        assert data == {
            "totalStudents": 0,
            "totalSubjects": 0,
            "averageGPA": 0.0,
            "bestGrade": "N/A",
            "recentResults": [],
        }

    def test_scenario_statistics(self, client, scenario):
        response = client.get("/api/dashboard")
        assert response.status_code == 200
        data = response.json()
        assert data["totalStudents"] == 2
        assert data["totalSubjects"] == 3
        assert data["bestGrade"] == "A+"
        # mean of 3.5 and 2.0
        assert data["averageGPA"] == 2.75
        assert [r["id"] for r in data["recentResults"]] == [r["id"] for r in reversed(scenario)]

    def test_recent_results_capped_at_five(self, client, add_result):
        created = [add_result(f"R{i}", "Math", 50 + i) for i in range(7)]
        recent = client.get("/api/dashboard").json()["recentResults"]
        assert len(recent) == 5
        assert [r["id"] for r in recent] == [r["id"] for r in reversed(created[2:])]

    def test_students_grouped_case_insensitively(self, client, add_result):
        add_result("2025IT01", "Math", 85)
        add_result("2025it01", "Sci", 30)
        data = client.get("/api/dashboard").json()
        assert data["totalStudents"] == 1
        assert data["averageGPA"] == 2.0

    def test_best_grade_without_top_band(self, client, add_result):
        add_result("A1", "Math", 41)
        add_result("A2", "Sci", 66)
        assert client.get("/api/dashboard").json()["bestGrade"] == "B"
