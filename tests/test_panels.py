import pytest

from dearself.core.breathing import get_pattern
from dearself.core.exceptions import (
    AuthError,
    ConfirmationRequired,
    NotFoundError,
    ValidationError,
)
from dearself.core.session import AuthSession
from dearself.core.timer import BreathingTimer
from dearself.models.enums import BreathingPhase, Table
from dearself.services import (
    BreathingPanel,
    BreathingRegistry,
    DashboardPanel,
    HydrationPanel,
    JournalPanel,
    MoodPanel,
    StepsPanel,
    TasksPanel,
)
from dearself.services.journal import preview, word_count

from tests.conftest import FakeTicker

def rows(store, table):
    return store.table(table).select("*").execute()

# ===== COMMON BEHAVIOUR =====

class TestPanelBase:
    def test_load_requires_session(self, store, auth_provider, goals, clock):
        panel = TasksPanel(store, AuthSession(auth_provider), goals, clock)
        assert panel.load() is False
        assert panel.loaded is False

    def test_mutation_requires_session(self, store, auth_provider, goals, clock):
        panel = TasksPanel(store, AuthSession(auth_provider), goals, clock)
        with pytest.raises(AuthError):
            panel.create("Water plants")

    def test_failed_load_keeps_view(self, make_panel, store):
        panel = make_panel(HydrationPanel)
        panel.log_water(300)
        store.fail_reads = True
        assert panel.load() is False
        assert panel.total == 300

    def test_failed_write_keeps_view(self, make_panel, store):
        panel = make_panel(HydrationPanel)
        panel.log_water(300)
        store.fail_writes = True
        assert panel.log_water(200) is False
        assert panel.total == 300

    def test_sign_out_clears_view(self, make_panel, session):
        panel = make_panel(TasksPanel)
        panel.attach()
        panel.create("Read a chapter")
        session.sign_out()
        assert panel.tasks == []
        assert panel.loaded is False

    def test_rows_are_scoped_to_user(self, make_panel, other_session):
        make_panel(TasksPanel).create("Mine")
        theirs = make_panel(TasksPanel, as_session=other_session)
        assert theirs.load() is True
        assert theirs.tasks == []

# ===== TASKS =====

class TestTasksPanel:
    def test_create(self, make_panel):
        panel = make_panel(TasksPanel)
        assert panel.create("  Meditate  ", "ten minutes") is True
        task = panel.tasks[0]
        assert task.title == "Meditate"
        assert task.completed is False
        assert task.priority.value == "medium"
        assert panel.view()["total_count"] == 1

    @pytest.mark.parametrize("title", ["", "   ", "x" * 201])
    def test_invalid_title_writes_nothing(self, make_panel, store, title):
        panel = make_panel(TasksPanel)
        with pytest.raises(ValidationError):
            panel.create(title)
        assert rows(store, Table.TODOS) == []

    def test_invalid_priority(self, make_panel):
        with pytest.raises(ValidationError):
            make_panel(TasksPanel).create("Walk", priority="urgent")

    def test_newest_first(self, make_panel):
        panel = make_panel(TasksPanel)
        panel.create("first")
        panel.create("second")
        assert [task.title for task in panel.tasks] == ["second", "first"]

    def test_toggle(self, make_panel):
        panel = make_panel(TasksPanel)
        panel.create("Journal")
        task_id = panel.tasks[0].id
        panel.toggle(task_id)
        assert panel.tasks[0].completed is True
        assert panel.completed_count == 1
        panel.toggle(task_id)
        assert panel.tasks[0].completed is False

    def test_update(self, make_panel):
        panel = make_panel(TasksPanel)
        panel.create("Journal")
        panel.update(panel.tasks[0].id, title="Journal tonight", priority="high")
        assert panel.tasks[0].title == "Journal tonight"
        assert panel.tasks[0].priority.value == "high"
        with pytest.raises(ValidationError):
            panel.update(panel.tasks[0].id)

    def test_delete_needs_confirmation(self, make_panel, store):
        panel = make_panel(TasksPanel)
        panel.create("Stretch")
        task_id = panel.tasks[0].id
        with pytest.raises(ConfirmationRequired):
            panel.delete(task_id)
        assert len(rows(store, Table.TODOS)) == 1

        assert panel.delete(task_id, confirmed=True) is True
        assert panel.tasks == []

    def test_cannot_touch_other_users_task(self, make_panel, other_session, store):
        mine = make_panel(TasksPanel)
        mine.create("Private")
        task_id = mine.tasks[0].id

        theirs = make_panel(TasksPanel, as_session=other_session)
        theirs.load()
        with pytest.raises(NotFoundError):
            theirs.toggle(task_id)
        with pytest.raises(NotFoundError):
            theirs.delete(task_id, confirmed=True)
        assert len(rows(store, Table.TODOS)) == 1

# ===== HYDRATION =====

class TestHydrationPanel:
    def test_total_and_percentage(self, make_panel):
        panel = make_panel(HydrationPanel)
        panel.log_water(250)
        panel.log_water(250)
        assert panel.total == 500
        assert panel.percentage == 25.0
        assert [log.amount_ml for log in panel.logs] == [250, 250]

    def test_percentage_capped(self, make_panel):
        panel = make_panel(HydrationPanel)
        panel.log_water(2500)
        assert panel.percentage == 100.0

    @pytest.mark.parametrize("amount", [0, -250, 1.5, "lots"])
    def test_invalid_amount(self, make_panel, store, amount):
        with pytest.raises(ValidationError):
            make_panel(HydrationPanel).log_water(amount)
        assert rows(store, Table.HYDRATION_LOGS) == []

    def test_weekly_totals(self, make_panel, store, session):
        table = store.table(Table.HYDRATION_LOGS)
        for amount, day in [(500, "2025-06-05"), (400, "2025-06-08"), (300, "2025-06-12"), (200, "2025-06-12")]:
            table.insert({"amount_ml": amount, "date": day, "user_id": session.user_id})
        panel = make_panel(HydrationPanel)
        panel.load()
        assert [(day.date, day.amount) for day in panel.weekly] == [("2025-06-08", 400), ("2025-06-12", 500)]
        assert panel.total == 0

    def test_delete(self, make_panel):
        panel = make_panel(HydrationPanel)
        panel.log_water(250)
        panel.delete(panel.logs[0].id)
        assert panel.total == 0

    def test_recommendations(self, make_panel):
        panel = make_panel(HydrationPanel)
        assert panel.recommendation(hour=20)["type"] == "warning"
        assert panel.recommendation(hour=9)["type"] == "info"
        panel.log_water(1600)
        assert panel.recommendation()["type"] == "good"
        panel.log_water(400)
        assert panel.recommendation()["type"] == "success"

    def test_quick_amounts(self, make_panel):
        amounts = make_panel(HydrationPanel).quick_amounts()
        assert [quick["amount"] for quick in amounts] == [250, 500, 750, 1000]
        assert amounts[0]["label"] == "Glass"

# ===== MOOD =====

class TestMoodPanel:
    def test_second_check_in_replaces_first(self, make_panel, store):
        panel = make_panel(MoodPanel)
        panel.log_mood("happy", 7, "sunny walk")
        panel.log_mood("calm", 4)
        assert len(rows(store, Table.MOOD_LOGS)) == 1
        assert panel.today_log.mood.value == "calm"
        assert panel.today_log.intensity == 4
        assert panel.today_log.notes is None

    def test_new_day_new_row(self, make_panel, store, clock):
        panel = make_panel(MoodPanel)
        panel.log_mood("happy", 7)
        clock.advance(days=1)
        panel.log_mood("sad", 3)
        assert len(rows(store, Table.MOOD_LOGS)) == 2
        assert panel.average_intensity == 5.0

    @pytest.mark.parametrize("mood, intensity", [("happy", 0), ("happy", 11), ("grumpy", 5)])
    def test_invalid_check_in(self, make_panel, store, mood, intensity):
        with pytest.raises(ValidationError):
            make_panel(MoodPanel).log_mood(mood, intensity)
        assert rows(store, Table.MOOD_LOGS) == []

    def test_view(self, make_panel):
        panel = make_panel(MoodPanel)
        assert panel.view()["today"] is None
        panel.log_mood("excited", 9)
        view = panel.view()
        assert view["today"]["emoji"] == "🤩"
        assert len(view["options"]) == 6
        assert view["recommendation"]["title"] == "Wonderful energy! ✨"

# ===== STEPS =====

class TestStepsPanel:
    def test_single_row_per_day(self, make_panel, store):
        panel = make_panel(StepsPanel)
        panel.log_steps(4000)
        panel.log_steps(6500)
        assert len(rows(store, Table.STEPS_LOGS)) == 1
        assert panel.steps_today == 6500
        assert panel.percentage == 65.0

    def test_zero_allowed_negative_rejected(self, make_panel):
        panel = make_panel(StepsPanel)
        assert panel.log_steps(0) is True
        with pytest.raises(ValidationError):
            panel.log_steps(-1)

    def test_most_recent_duplicate_wins(self, make_panel, store, session):
        table = store.table(Table.STEPS_LOGS)
        table.insert({"steps": 1000, "date": "2025-06-15", "user_id": session.user_id})
        table.insert({"steps": 2000, "date": "2025-06-15", "user_id": session.user_id})
        panel = make_panel(StepsPanel)
        panel.load()
        assert panel.steps_today == 2000

    def test_weekly_average_rounds(self, make_panel, store, session):
        table = store.table(Table.STEPS_LOGS)
        table.insert({"steps": 1000, "date": "2025-06-13", "user_id": session.user_id})
        table.insert({"steps": 2001, "date": "2025-06-14", "user_id": session.user_id})
        panel = make_panel(StepsPanel)
        panel.load()
        assert panel.weekly_average == 1501
        assert [log.date for log in panel.weekly] == ["2025-06-14", "2025-06-13"]

    def test_recommendation_at_goal(self, make_panel):
        panel = make_panel(StepsPanel)
        panel.log_steps(12000)
        assert panel.recommendation()["title"] == "Outstanding! 🏆"

# ===== JOURNAL =====

class TestJournalPanel:
    def test_create_defaults_to_today(self, make_panel):
        panel = make_panel(JournalPanel)
        panel.create("Morning", "Slept well and woke early")
        entry = panel.entries[0]
        assert entry.date == "2025-06-15"
        assert entry.mood.value == "neutral"

    @pytest.mark.parametrize("title, content, mood, day", [
        ("", "content", "calm", None),
        ("title", "  ", "calm", None),
        ("title", "content", "bored", None),
        ("title", "content", "calm", "15/06/2025"),
        ("title", "content", "calm", "2025-13-45"),
        ("title", "content", "calm", "2025-02-30"),
        ("title", "content", "calm", "2025-06-15\n"),
        ("title", "content", "calm", "2025-6-15"),
    ])
    def test_invalid_entry(self, make_panel, store, title, content, mood, day):
        with pytest.raises(ValidationError):
            make_panel(JournalPanel).create(title, content, mood, day)
        assert rows(store, Table.JOURNAL_ENTRIES) == []

    def test_filter(self, make_panel):
        panel = make_panel(JournalPanel)
        panel.create("Gratitude", "Thankful for friends", "happy")
        panel.create("Worries", "Deadline at work", "anxious")
        assert [entry.title for entry in panel.filtered("FRIENDS")] == ["Gratitude"]
        assert [entry.title for entry in panel.filtered(mood="anxious")] == ["Worries"]
        assert panel.filtered("work", mood="happy") == []
        assert panel.view(search="dead")["total_count"] == 2

    def test_update_and_delete(self, make_panel):
        panel = make_panel(JournalPanel)
        panel.create("Draft", "first words")
        entry_id = panel.entries[0].id
        panel.update(entry_id, "Final", "last words", "calm", "2025-06-14")
        assert panel.entries[0].title == "Final"
        assert panel.entries[0].date == "2025-06-14"

        with pytest.raises(ConfirmationRequired):
            panel.delete(entry_id)
        panel.delete(entry_id, confirmed=True)
        assert panel.entries == []

    def test_word_count_and_preview(self):
        assert word_count("one  two\nthree") == 3
        text = "a" * 301
        assert preview(text) == "a" * 300 + "..."
        assert preview("short") == "short"

# ===== BREATHING =====

class TestBreathingPanel:
    @pytest.fixture
    def panel(self, make_panel, ticker):
        return make_panel(BreathingPanel, timer=BreathingTimer(ticker))

    def test_record_needs_elapsed_time(self, panel, store):
        with pytest.raises(ValidationError):
            panel.record()
        assert rows(store, Table.BREATHING_SESSIONS) == []

    def test_record(self, panel, ticker, store):
        panel.select_pattern("Box Breathing")
        panel.toggle()
        ticker.fire(20)
        assert panel.record() is True

        saved = rows(store, Table.BREATHING_SESSIONS)[0]
        assert saved["pattern_name"] == "Box Breathing"
        assert saved["duration_seconds"] == 20
        assert saved["cycles_completed"] == 1
        assert saved["date"] == "2025-06-15"
        assert panel.timer.session.elapsed_seconds == 0
        assert not ticker.active
        assert len(panel.sessions_today) == 1
        assert panel.total_sessions == 1

    def test_failed_record_keeps_session(self, panel, ticker, store):
        panel.toggle()
        ticker.fire(5)
        store.fail_writes = True
        assert panel.record() is False
        assert panel.timer.session.elapsed_seconds == 5
        assert panel.timer.session.running is False

    def test_unknown_pattern(self, panel):
        with pytest.raises(NotFoundError):
            panel.select_pattern("Lion's Breath")

    def test_sign_out_resets_timer(self, panel, ticker, session):
        panel.attach()
        panel.toggle()
        ticker.fire(3)
        session.sign_out()
        assert panel.timer.session.elapsed_seconds == 0
        assert not ticker.active

    def test_view(self, panel):
        view = panel.view()
        assert view["selected"] == "4-7-8 Relaxation"
        assert len(view["patterns"]) == 3
        assert view["timer"]["phase"] == BreathingPhase.INHALE.value

class TestBreathingRegistry:
    def test_one_timer_per_user(self):
        tickers = {}
        registry = BreathingRegistry(lambda user_id: tickers.setdefault(user_id, FakeTicker()))
        timer = registry.timer_for("u1")
        assert registry.timer_for("u1") is timer
        assert registry.timer_for("u2") is not timer
        assert len(registry) == 2

    def test_discard_stops_timer(self):
        ticker = FakeTicker()
        registry = BreathingRegistry(lambda user_id: ticker)
        registry.timer_for("u1").start()
        registry.discard("u1")
        assert not ticker.active
        assert len(registry) == 0

    def test_pages_have_separate_timers(self):
        registry = BreathingRegistry(lambda key: FakeTicker())
        first = registry.timer_for("u1", "tab-a")
        second = registry.timer_for("u1", "tab-b")
        first.start()

        registry.discard("u1", "tab-b")
        assert first.ticker.active
        assert not second.ticker.active
        assert registry.get("u1", "tab-a") is first
        assert registry.get("u1", "tab-b") is None

    def test_get_never_creates(self):
        registry = BreathingRegistry(lambda key: FakeTicker())
        assert registry.get("u1") is None
        assert len(registry) == 0

    def test_discard_user_drops_every_page(self):
        registry = BreathingRegistry(lambda key: FakeTicker())
        for page_id in ("tab-a", "tab-b"):
            registry.timer_for("u1", page_id).start()
        registry.timer_for("u2")
        assert registry.discard_user("u1") == 2
        assert len(registry) == 1

    def test_evict_idle(self):
        now = [100.0]
        registry = BreathingRegistry(lambda key: FakeTicker(), clock=lambda: now[0])
        idle = registry.timer_for("u1", "closed-tab")
        idle.start()
        watched = registry.timer_for("u1", "open-tab")

        now[0] = 150.0
        registry.get("u1", "open-tab")
        now[0] = 200.0
        assert registry.evict_idle(60) == 1
        assert not idle.ticker.active
        assert registry.get("u1", "open-tab") is watched
        assert registry.get("u1", "closed-tab") is None

    def test_close_all(self):
        registry = BreathingRegistry(lambda user_id: FakeTicker())
        timers = [registry.timer_for(user_id) for user_id in ("u1", "u2")]
        for timer in timers:
            timer.start()
        registry.close_all()
        assert all(not timer.ticker.active for timer in timers)
        assert len(registry) == 0

# ===== DASHBOARD =====

class TestDashboardPanel:
    def test_summary(self, make_panel, store, session, ticker):
        tasks = make_panel(TasksPanel)
        tasks.create("one")
        tasks.create("two")
        tasks.toggle(tasks.tasks[0].id)
        make_panel(HydrationPanel).log_water(750)
        make_panel(StepsPanel).log_steps(4321)
        make_panel(MoodPanel).log_mood("calm", 6)
        make_panel(JournalPanel).create("Note", "text")
        store.table(Table.BREATHING_SESSIONS).insert({
            "pattern_name": "Box Breathing", "duration_seconds": 60,
            "cycles_completed": 3, "date": "2025-06-15", "user_id": session.user_id,
        })

        panel = make_panel(DashboardPanel)
        panel.load()
        summary = panel.summary
        assert (summary.completed_tasks, summary.total_tasks) == (1, 2)
        assert summary.hydration_ml == 750
        assert summary.today_steps == 4321
        assert summary.mood_score == 6
        assert summary.journal_entries == 1
        assert summary.breathing_sessions == 1

        cards = {card["title"]: card["value"] for card in panel.cards()}
        assert cards["Tasks Today"] == "1/2"
        assert cards["Steps Today"] == "4,321"

    def test_empty_summary(self, make_panel):
        panel = make_panel(DashboardPanel)
        panel.load()
        assert panel.summary.to_dict() == {
            "total_tasks": 0, "completed_tasks": 0, "hydration_ml": 0, "today_steps": 0,
            "journal_entries": 0, "mood_score": 0, "breathing_sessions": 0,
        }
