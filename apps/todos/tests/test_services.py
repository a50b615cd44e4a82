"""
Unit tests for the todo store.
Covers filter resolution, partial updates, toggling and ownership checks.
"""
from datetime import timedelta
from unittest.mock import patch
from uuid import uuid4

from django.test import TestCase
from django.utils import timezone

from apps.core.exceptions import Forbidden, NotFound, Unauthenticated
from apps.todos.dtos import TodoDTO, TodoFilters, TodoIn, current_millis
from apps.todos.models import Todo
from apps.todos import services


DAY_MS = 24 * 60 * 60 * 1000


def make_todo(user_id, text, category="Home", priority="low", is_completed=False,
              minutes_ago=0, deadline=None):
    """Create a todo directly, with a controlled creation time."""
    return Todo.objects.create(
        user_id=user_id,
        text=text,
        category=category,
        priority=priority,
        is_completed=is_completed,
        deadline=deadline,
        created_at=timezone.now() - timedelta(minutes=minutes_ago),
    )


class TodoFiltersTest(TestCase):
    def test_narrowing_precedence(self):
        self.assertEqual(
            TodoFilters(category="Work", priority="high", completed=True).narrowing_dimension(),
            'category',
        )
        self.assertEqual(TodoFilters(priority="high", completed=True).narrowing_dimension(), 'priority')
        self.assertEqual(TodoFilters(completed=False).narrowing_dimension(), 'completed')
        self.assertIsNone(TodoFilters().narrowing_dimension())

    def test_empty_strings_are_not_filters(self):
        filters = TodoFilters(category="", priority="", search="   ")
        self.assertIsNone(filters.narrowing_dimension())
        self.assertIsNone(filters.search_text)

    def test_search_text_is_stripped(self):
        self.assertEqual(TodoFilters(search="  milk ").search_text, "milk")


class AddTodoTest(TestCase):
    def setUp(self):
        self.user_id = uuid4()

    def test_add_starts_open(self):
        payload = TodoIn(text="Buy milk", category="Home", priority="low")
        todo = services.add_todo(self.user_id, payload)

        self.assertFalse(todo.is_completed)
        self.assertEqual(todo.user_id, self.user_id)
        self.assertIsNone(todo.description)
        self.assertIsNone(todo.deadline)

    def test_add_ignores_supplied_completion(self):
        payload = TodoIn(**{"text": "Buy milk", "category": "Home", "priority": "low", "is_completed": True})
        todo = services.add_todo(self.user_id, payload)
        self.assertFalse(todo.is_completed)
        self.assertFalse(Todo.objects.get(id=todo.id).is_completed)

    def test_add_requires_user(self):
        payload = TodoIn(text="Buy milk", category="Home", priority="low")
        with self.assertRaises(Unauthenticated):
            services.add_todo(None, payload)
        self.assertEqual(Todo.objects.count(), 0)


class MutationTest(TestCase):
    def setUp(self):
        self.owner_id = uuid4()
        self.other_id = uuid4()
        self.todo = Todo.objects.create(
            user_id=self.owner_id,
            text="Buy milk",
            description="2 litres",
            category="Home",
            priority="low",
            deadline=1_700_000_000_000,
        )

    def snapshot(self):
        todo = Todo.objects.get(id=self.todo.id)
        return {
            field: getattr(todo, field)
            for field in ('text', 'description', 'is_completed', 'category',
                          'priority', 'deadline', 'created_at', 'user_id')
        }

    def test_update_changes_only_supplied_fields(self):
        before = self.snapshot()

        updated = services.update_todo(self.owner_id, self.todo.id, {"priority": "high"})

        after = self.snapshot()
        self.assertEqual(updated.priority, "high")
        self.assertEqual(after.pop('priority'), "high")
        before.pop('priority')
        self.assertEqual(after, before)

    def test_update_ignores_completion(self):
        services.update_todo(self.owner_id, self.todo.id, {"is_completed": True, "text": "Buy oat milk"})
        todo = Todo.objects.get(id=self.todo.id)
        self.assertFalse(todo.is_completed)
        self.assertEqual(todo.text, "Buy oat milk")

    def test_update_can_clear_optional_fields(self):
        services.update_todo(self.owner_id, self.todo.id, {"description": None, "deadline": None})
        todo = Todo.objects.get(id=self.todo.id)
        self.assertIsNone(todo.description)
        self.assertIsNone(todo.deadline)

    def test_toggle_is_an_involution(self):
        before = self.snapshot()

        once = services.toggle_todo(self.owner_id, self.todo.id)
        self.assertTrue(once.is_completed)

        twice = services.toggle_todo(self.owner_id, self.todo.id)
        self.assertFalse(twice.is_completed)
        self.assertEqual(self.snapshot(), before)

    def test_toggle_flips_the_stored_value(self):
        # Another request completed the todo after this one loaded its copy
        stale = Todo.objects.get(id=self.todo.id)
        Todo.objects.filter(id=self.todo.id).update(is_completed=True)

        with patch("apps.todos.services.get_owned_or_raise", return_value=stale):
            result = services.toggle_todo(self.owner_id, self.todo.id)

        self.assertFalse(result.is_completed)
        self.assertFalse(Todo.objects.get(id=self.todo.id).is_completed)

    def test_remove(self):
        services.remove_todo(self.owner_id, self.todo.id)
        self.assertFalse(Todo.objects.filter(id=self.todo.id).exists())

    def test_missing_todo(self):
        missing = uuid4()
        with self.assertRaises(NotFound):
            services.update_todo(self.owner_id, missing, {"text": "x"})
        with self.assertRaises(NotFound):
            services.toggle_todo(self.owner_id, missing)
        with self.assertRaises(NotFound):
            services.remove_todo(self.owner_id, missing)

    def test_cross_user_mutations_are_forbidden_and_change_nothing(self):
        before = self.snapshot()

        with self.assertRaises(Forbidden):
            services.update_todo(self.other_id, self.todo.id, {"text": "hijacked"})
        with self.assertRaises(Forbidden):
            services.toggle_todo(self.other_id, self.todo.id)
        with self.assertRaises(Forbidden):
            services.remove_todo(self.other_id, self.todo.id)

        self.assertEqual(self.snapshot(), before)

    def test_anonymous_mutations(self):
        with self.assertRaises(Unauthenticated):
            services.update_todo(None, self.todo.id, {"text": "x"})
        with self.assertRaises(Unauthenticated):
            services.toggle_todo(None, self.todo.id)
        with self.assertRaises(Unauthenticated):
            services.remove_todo(None, self.todo.id)


class ListTodosTest(TestCase):
    def setUp(self):
        self.user_id = uuid4()
        self.other_id = uuid4()

        self.report = make_todo(self.user_id, "Write report", "Work", "high", minutes_ago=50)
        self.email = make_todo(self.user_id, "Answer email", "Work", "low", minutes_ago=40)
        self.milk = make_todo(self.user_id, "Buy milk", "Home", "low", minutes_ago=30)
        self.laundry = make_todo(self.user_id, "Do laundry", "Home", "high",
                                 is_completed=True, minutes_ago=20)
        self.oat_milk = make_todo(self.user_id, "Buy oat milk", "Home", "high", minutes_ago=10)

        make_todo(self.other_id, "Buy milk for the office", "Work", "high")

    def ids(self, todos):
        return [todo.id for todo in todos]

    def test_anonymous_gets_empty_list(self):
        self.assertEqual(services.list_todos(None), [])
        self.assertEqual(services.list_todos(None, TodoFilters(search="milk")), [])

    def test_no_filters_newest_first(self):
        result = services.list_todos(self.user_id)
        self.assertEqual(
            self.ids(result),
            [self.oat_milk.id, self.laundry.id, self.milk.id, self.email.id, self.report.id],
        )

    def test_category_and_priority_combined(self):
        result = services.list_todos(self.user_id, TodoFilters(category="Work", priority="high"))
        self.assertEqual(self.ids(result), [self.report.id])

    def test_priority_and_completed_combined(self):
        result = services.list_todos(self.user_id, TodoFilters(priority="high", completed=False))
        self.assertEqual(self.ids(result), [self.oat_milk.id, self.report.id])

    def test_completed_only(self):
        result = services.list_todos(self.user_id, TodoFilters(completed=True))
        self.assertEqual(self.ids(result), [self.laundry.id])

    def test_unknown_category_is_empty(self):
        self.assertEqual(services.list_todos(self.user_id, TodoFilters(category="Garden")), [])

    def test_search_scoped_to_caller(self):
        result = services.list_todos(self.user_id, TodoFilters(search="milk"))
        self.assertEqual(set(self.ids(result)), {self.milk.id, self.oat_milk.id})

    def test_search_with_completed_filter(self):
        self.milk.is_completed = True
        self.milk.save()

        result = services.list_todos(self.user_id, TodoFilters(search="milk", completed=False))
        self.assertEqual(self.ids(result), [self.oat_milk.id])

    def test_search_with_priority_post_filter(self):
        result = services.list_todos(self.user_id, TodoFilters(search="milk", priority="low"))
        self.assertEqual(self.ids(result), [self.milk.id])

    def test_search_folds_non_ascii_case(self):
        trip = make_todo(self.user_id, "École trip", "Home", "low")

        result = services.list_todos(self.user_id, TodoFilters(search="école"))

        self.assertEqual(self.ids(result), [trip.id])

    def test_search_with_category(self):
        result = services.list_todos(self.user_id, TodoFilters(search="milk", category="Work"))
        self.assertEqual(result, [])

    def test_blank_search_falls_through(self):
        result = services.list_todos(self.user_id, TodoFilters(search="   ", category="Home"))
        self.assertEqual(self.ids(result), [self.oat_milk.id, self.laundry.id, self.milk.id])

    def test_category_scenario(self):
        user_id = uuid4()
        services.add_todo(user_id, TodoIn(text="Buy milk", category="Home", priority="low"))

        self.assertEqual(services.list_todos(user_id, TodoFilters(category="Work")), [])
        home = services.list_todos(user_id, TodoFilters(category="Home"))
        self.assertEqual([t.text for t in home], ["Buy milk"])


class OverdueAndStatsTest(TestCase):
    def setUp(self):
        self.user_id = uuid4()

    def test_overdue_scenario(self):
        yesterday = current_millis() - DAY_MS
        services.add_todo(
            self.user_id,
            TodoIn(text="Pay rent", category="Home", priority="high", deadline=yesterday),
        )

        [todo] = services.list_todos(self.user_id)
        now = current_millis()
        self.assertTrue(todo.deadline < now and not todo.is_completed)
        self.assertTrue(todo.is_overdue(now))

    def test_completed_or_undated_is_not_overdue(self):
        now = current_millis()
        base = dict(id=uuid4(), user_id=self.user_id, text="t", description=None,
                    category="Home", priority="low", created_at=timezone.now())

        self.assertFalse(TodoDTO(is_completed=True, deadline=now - DAY_MS, **base).is_overdue(now))
        self.assertFalse(TodoDTO(is_completed=False, deadline=None, **base).is_overdue(now))
        self.assertFalse(TodoDTO(is_completed=False, deadline=now + DAY_MS, **base).is_overdue(now))

    def test_summarize(self):
        now = current_millis()
        make_todo(self.user_id, "late", deadline=now - DAY_MS)
        make_todo(self.user_id, "done late", deadline=now - DAY_MS, is_completed=True)
        make_todo(self.user_id, "future", deadline=now + DAY_MS)

        stats = services.summarize_todos(services.list_todos(self.user_id), now)

        self.assertEqual((stats.total, stats.completed, stats.overdue), (3, 1, 1))

    def test_category_in_use(self):
        make_todo(self.user_id, "Buy milk", category="Home")
        self.assertTrue(services.category_in_use(self.user_id, "Home"))
        self.assertFalse(services.category_in_use(self.user_id, "Work"))
        self.assertFalse(services.category_in_use(uuid4(), "Home"))
