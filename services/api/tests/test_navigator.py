"""
Tests for class/student selection.

Run with: pytest tests/test_navigator.py -v
"""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.navigator import SelectionNavigator
from models import Student


def roster():
    return [
        Student(id="s3", full_name="Citra", class_name="VIII A"),
        Student(id="s1", full_name="Ana", class_name="VII A"),
        Student(id="s2", full_name="Bayu", class_name="VII A"),
        Student(id="s4", full_name="Dewi", class_name="VII B"),
    ]


class TestClasses:
    def test_sorted_distinct(self):
        nav = SelectionNavigator(roster())
        assert nav.classes() == ["VII A", "VII B", "VIII A"]

    def test_students_keep_input_order(self):
        nav = SelectionNavigator(roster())
        assert [s.id for s in nav.students_in_class("VII A")] == ["s1", "s2"]

    def test_live_list_not_copied(self):
        students = roster()
        nav = SelectionNavigator(students)
        students.append(Student(id="s5", full_name="Eka", class_name="IX A"))
        assert "IX A" in nav.classes()


class TestResolve:
    def test_resolve_within_class(self):
        nav = SelectionNavigator(roster())
        assert nav.resolve("VII A", "s2").full_name == "Bayu"
        assert nav.resolve("VIII A", "s2") is None
        assert nav.resolve("VII A", None) is None

    def test_find_anywhere(self):
        nav = SelectionNavigator(roster())
        assert nav.find("s4").class_name == "VII B"
        assert nav.find("nope") is None


class TestReconcile:
    def test_first_render_picks_first_class(self):
        nav = SelectionNavigator(roster())
        assert nav.reconcile(None, None) == ("VII A", "s1")

    def test_keeps_valid_selection(self):
        nav = SelectionNavigator(roster())
        assert nav.reconcile("VII A", "s2") == ("VII A", "s2")

    def test_fallback_when_student_vanished(self):
        """A student no longer in the list falls back to the class's first student."""
        students = roster()
        nav = SelectionNavigator(students)
        students[:] = [s for s in students if s.id != "s2"]
        assert nav.reconcile("VII A", "s2") == ("VII A", "s1")

    def test_fallback_with_two_classes(self):
        students = [
            Student(id="a", full_name="A", class_name="VII A"),
            Student(id="b", full_name="B", class_name="VIII A"),
        ]
        nav = SelectionNavigator(students)
        assert nav.reconcile("VII A", "gone") == ("VII A", "a")

    def test_student_from_other_class(self):
        nav = SelectionNavigator(roster())
        assert nav.reconcile("VII A", "s3") == ("VII A", "s1")

    def test_vanished_class(self):
        nav = SelectionNavigator(roster())
        assert nav.reconcile("IX Z", "s1") == ("VII A", "s1")

    def test_empty_list(self):
        nav = SelectionNavigator([])
        assert nav.classes() == []
        assert nav.reconcile("VII A", "s1") == (None, None)


class TestJump:
    def test_overrides_class_filter(self):
        nav = SelectionNavigator(roster())
        assert nav.jump_to("s3") == ("VIII A", "s3")

    def test_unknown_student(self):
        nav = SelectionNavigator(roster())
        assert nav.jump_to("missing") is None
