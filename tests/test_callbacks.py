"""Tests for the callback pipeline and validation around save()."""

import pytest

pytestmark = pytest.mark.unit

from docmap import CallbackHook, Document, ValidationError, callback, validator
from docmap.document.callbacks import CallbackRegistry


class TestCallbackRegistry:
    """Tests for the registry on its own."""

    def test_runs_in_registration_order(self):
        registry = CallbackRegistry()
        seen = []
        registry.register(CallbackHook.BEFORE_SAVE, lambda document: seen.append("first"))
        registry.register("before_save", lambda document: seen.append("second"))
        assert registry.run(CallbackHook.BEFORE_SAVE, None)
        assert seen == ["first", "second"]

    def test_false_halts_the_chain(self):
        registry = CallbackRegistry()
        seen = []
        registry.register(CallbackHook.AFTER_SAVE, lambda document: seen.append("first"))
        registry.register(CallbackHook.AFTER_SAVE, lambda document: False)
        registry.register(CallbackHook.AFTER_SAVE, lambda document: seen.append("never"))
        assert registry.run(CallbackHook.AFTER_SAVE, None) is False
        assert seen == ["first"]

    def test_none_does_not_halt(self):
        registry = CallbackRegistry()
        registry.register(CallbackHook.BEFORE_CREATE, lambda document: None)
        assert registry.run(CallbackHook.BEFORE_CREATE, None)

    def test_inherits_handlers(self):
        parent = CallbackRegistry()
        handler = lambda document: None
        parent.register(CallbackHook.AFTER_CREATE, handler)
        child = CallbackRegistry(parent)
        child.register(CallbackHook.AFTER_CREATE, print)
        assert child.handlers(CallbackHook.AFTER_CREATE) == (handler, print)
        assert parent.handlers(CallbackHook.AFTER_CREATE) == (handler,)

    def test_rejects_unknown_hook_and_non_callable(self):
        registry = CallbackRegistry()
        with pytest.raises(ValueError):
            registry.register("around_save", print)
        with pytest.raises(TypeError):
            registry.register(CallbackHook.BEFORE_SAVE, "not callable")


class TestSaveCallbacks:
    """Tests for which hooks save() runs, and in which order."""

    def test_root_insert_order(self, memory_db):
        seen = []

        class Journal(Document):
            __fields__ = ["title"]

        for hook in CallbackHook:
            Journal.register_callback(hook, lambda document, hook=hook: seen.append(str(hook)))

        assert Journal.create({"title": "Day one"})
        assert seen == [
            "before_validation",
            "after_validation",
            "before_save",
            "before_create",
            "after_create",
            "after_save",
        ]

    def test_update_skips_create_hooks(self, memory_db):
        seen = []

        class Ledger(Document):
            __fields__ = ["total"]

        Ledger.register_callback(CallbackHook.BEFORE_CREATE, lambda document: seen.append("before_create"))
        Ledger.register_callback(CallbackHook.AFTER_SAVE, lambda document: seen.append("after_save"))

        ledger = Ledger.create({"total": 1})
        seen.clear()
        ledger.total = 2
        ledger.save()
        assert seen == ["after_save"]

    def test_class_body_decorator(self, memory_db):
        class Diary(Document):
            __fields__ = ["title", "slug"]

            @callback(CallbackHook.BEFORE_SAVE)
            def make_slug(self):
                self.slug = self.title.lower().replace(" ", "-")

        diary = Diary.create({"title": "Dear Diary"})
        assert diary.slug == "dear-diary"
        assert memory_db["diaries"].records[0]["slug"] == "dear-diary"

    def test_subclass_runs_parent_handlers_first(self, memory_db):
        seen = []

        class Notebook(Document):
            __fields__ = ["title"]

            @callback("before_save")
            def parent_handler(self):
                seen.append("parent")

        class Sketchbook(Notebook):
            @callback("before_save")
            def child_handler(self):
                seen.append("child")

        Sketchbook.create({"title": "Doodles"})
        assert seen == ["parent", "child"]
        seen.clear()
        Notebook.create({"title": "Notes"})
        assert seen == ["parent"]

    def test_halting_before_save_prevents_write(self, memory_db):
        class Draft(Document):
            __fields__ = ["title"]

        Draft.register_callback(CallbackHook.BEFORE_SAVE, lambda document: False)
        draft = Draft({"title": "Unfinished"})
        assert draft.save() is False
        assert draft.new_record()
        assert memory_db.total_writes() == 0

    def test_halting_after_save_reports_failure_after_write(self, memory_db):
        class Receipt(Document):
            __fields__ = ["amount"]

        Receipt.register_callback(CallbackHook.AFTER_SAVE, lambda document: False)
        assert Receipt.create({"amount": 5}) is False
        assert memory_db.total_writes() == 1

    def test_exceptions_propagate(self, memory_db):
        class Invoice(Document):
            __fields__ = ["amount"]

        def explode(document):
            raise RuntimeError("boom")

        Invoice.register_callback(CallbackHook.BEFORE_VALIDATION, explode)
        with pytest.raises(RuntimeError):
            Invoice({"amount": 1}).save()
        assert memory_db.total_writes() == 0


class TestValidation:
    """Tests for validators run during save()."""

    def test_presence(self, memory_db):
        class Account(Document):
            __fields__ = ["email", "tags"]

        Account.validates_presence_of("email", "tags")
        account = Account({"email": "", "tags": []})
        assert not account.valid()
        assert account.errors == ["email can't be blank", "tags can't be blank"]
        account.email = "bond@mi6.gov.uk"
        account.tags = ["agent"]
        assert account.valid()
        assert account.errors == []

    def test_failing_validation_prevents_write(self, memory_db):
        class Member(Document):
            __fields__ = ["email"]

        Member.validates_presence_of("email")
        member = Member()
        assert member.save() is False
        assert member.errors == ["email can't be blank"]
        assert memory_db.total_writes() == 0

    def test_validator_may_raise(self, memory_db):
        class Coupon(Document):
            __fields__ = ["discount"]

            @validator
            def discount_in_range(self):
                if not 0 <= (self.discount or 0) <= 100:
                    raise ValidationError("discount must be between 0 and 100", field="discount")

        coupon = Coupon({"discount": 150})
        assert coupon.save() is False
        assert coupon.errors == ["discount must be between 0 and 100"]
        coupon.discount = 50
        assert coupon.save() is coupon

    def test_validates_registers_function(self, memory_db):
        class Booking(Document):
            __fields__ = ["nights"]

        @Booking.validates
        def at_least_one_night(booking):
            return None if (booking.nights or 0) >= 1 else "nights must be at least 1"

        assert not Booking({"nights": 0}).valid()
        assert Booking({"nights": 2}).valid()

    def test_validation_hooks_wrap_validation(self, memory_db):
        class Profile(Document):
            __fields__ = ["handle"]

            @callback(CallbackHook.BEFORE_VALIDATION)
            def strip_handle(self):
                self.handle = (self.handle or "").strip()

        Profile.validates_presence_of("handle")
        assert Profile.create({"handle": "   "}) is False
        assert Profile.create({"handle": " q "}).handle == "q"
