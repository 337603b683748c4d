import pytest

from qa import consistency
from qa.enhancement import EnhancementPipeline
from qa.exceptions import Forbidden, NotFound
from qa.models import Answer, Notification, Question
from tests.conftest import FakeCapability


def _answer(question, author, content="Use reversed() or slicing."):
    return consistency.create_answer(question.id, author, content, EnhancementPipeline()).instance


class TestCreateQuestion:

    def test_stores_caller_content_when_unavailable(self, u1, pipeline):
        created = consistency.create_question(
            u1, "Why does my loop never end?", "The while loop keeps running forever.",
            ["Python", "loops", "python"], pipeline,
        )
        question = created.instance
        assert question.title == "Why does my loop never end?"
        assert question.tag_names == ["loops", "python"]
        assert question.answer_ids == []
        assert question.accepted_answer is None
        assert created.enhanced is False
        assert created.enhancement.status == "unavailable"

    def test_uses_enhanced_draft_and_suggested_tags(self, u1):
        capability = FakeCapability(
            '{"enhancedTitle": "Infinite while loop in Python", '
            '"enhancedDescription": "My while loop never terminates.", '
            '"suggestedTags": ["python", "loops"]}'
        )
        created = consistency.create_question(
            u1, "loop broken help", "my loop does not stop ever", [], EnhancementPipeline(capability)
        )
        assert created.instance.title == "Infinite while loop in Python"
        assert created.instance.tag_names == ["loops", "python"]
        assert created.enhanced is True

    def test_caller_tags_win_over_suggestions(self, u1):
        capability = FakeCapability(
            '{"enhancedTitle": "Reverse a list in Java", "enhancedDescription": "How do I reverse an ArrayList?", '
            '"suggestedTags": ["java"]}'
        )
        created = consistency.create_question(
            u1, "title here!", "description here", ["python"], EnhancementPipeline(capability)
        )
        assert created.instance.tag_names == ["python"]

    def test_failed_enhancement_keeps_original(self, u1):
        capability = FakeCapability(error=TimeoutError("deadline exceeded"))
        created = consistency.create_question(
            u1, "Original title", "Original description", [], EnhancementPipeline(capability)
        )
        assert created.instance.title == "Original title"
        assert created.instance.description == "Original description"
        assert created.enhancement.status == "failed"
        assert created.enhanced is False

    def test_caller_tags_are_normalized(self, u1, pipeline):
        created = consistency.create_question(
            u1, "How do tags get stored?", "Mixed case and padded tag labels.",
            ["Python", "python", " PYTHON "], pipeline,
        )
        assert created.instance.tag_names == ["python"]
        assert created.enhanced is False

    def test_set_tags_normalizes_labels(self, question):
        question.set_tags([" Django ", "DJANGO", "orm"])
        assert question.tag_names == ["django", "orm"]

    def test_enhanced_values_below_minimums_are_rejected(self, u1):
        capability = FakeCapability('{"enhancedTitle": "T", "enhancedDescription": "D"}')
        created = consistency.create_question(
            u1, "Why is my import failing?", "ImportError raised when running tests.",
            [], EnhancementPipeline(capability),
        )
        assert created.enhancement.status == "failed"
        assert created.instance.title == "Why is my import failing?"
        assert created.instance.description == "ImportError raised when running tests."
        assert created.enhanced is False


class TestCreateAnswer:

    def test_links_answer_and_notifies_author(self, question, u2):
        answer = _answer(question, u2)
        question.refresh_from_db()
        assert question.answer_ids == [answer.id]
        assert answer.upvotes == 0 and answer.downvotes == 0
        assert answer.is_accepted is False

        notification = Notification.objects.get(user=question.author)
        assert notification.is_read is False
        assert question.title in notification.message

    def test_own_question_gets_no_notification(self, question, u1):
        _answer(question, u1)
        assert Notification.objects.count() == 0

    def test_appends_in_creation_order(self, question, u2, u3):
        first = _answer(question, u2)
        second = _answer(question, u3)
        question.refresh_from_db()
        assert question.answer_ids == [first.id, second.id]

    def test_missing_question(self, u2):
        with pytest.raises(NotFound):
            consistency.create_answer(9999, u2, "Some helpful answer", EnhancementPipeline())
        assert Answer.objects.count() == 0

    def test_enhanced_content_is_stored(self, question, u2):
        capability = FakeCapability("Use list.reverse() to reverse in place.")
        created = consistency.create_answer(
            question.id, u2, "use reverse i think", EnhancementPipeline(capability)
        )
        assert created.instance.content == "Use list.reverse() to reverse in place."
        assert created.enhanced is True

    def test_too_short_enhanced_answer_keeps_original(self, question, u2):
        created = consistency.create_answer(
            question.id, u2, "Call reverse() on the list.", EnhancementPipeline(FakeCapability("ok"))
        )
        assert created.instance.content == "Call reverse() on the list."
        assert created.enhancement.status == "failed"
        assert created.enhanced is False

    def test_notification_failure_does_not_fail_answer(self, question, u2, monkeypatch):
        def boom(**kwargs):
            raise RuntimeError("notification store down")

        monkeypatch.setattr(Notification.objects, "create", boom)
        answer = _answer(question, u2)
        question.refresh_from_db()
        assert question.answer_ids == [answer.id]
        assert Notification.objects.count() == 0


class TestUpdate:

    def test_author_updates_question(self, question, u1):
        updated = consistency.update_question(
            question.id, u1, title="How do I reverse a Python list?", tags=["python"]
        )
        assert updated.title == "How do I reverse a Python list?"
        assert updated.description == question.description
        assert updated.tag_names == ["python"]

    def test_non_author_cannot_update_question(self, question, u2):
        with pytest.raises(Forbidden):
            consistency.update_question(question.id, u2, title="Hijacked title here")

    def test_update_answer_keeps_votes(self, question, u2, u3):
        answer = _answer(question, u2)
        Answer.objects.filter(pk=answer.pk).update(upvotes=3)
        updated = consistency.update_answer(answer.id, u2, "A better answer body")
        assert updated.content == "A better answer body"
        assert updated.upvotes == 3
        with pytest.raises(Forbidden):
            consistency.update_answer(answer.id, u3, "Not my answer to edit")


class TestDelete:

    def test_delete_answer_unlinks_it(self, question, u2, u3):
        first = _answer(question, u2)
        second = _answer(question, u3)
        consistency.delete_answer(first.id, u2)
        question.refresh_from_db()
        assert question.answer_ids == [second.id]
        assert not Answer.objects.filter(pk=first.id).exists()

    def test_only_author_deletes_answer(self, question, u2, u3):
        answer = _answer(question, u2)
        with pytest.raises(Forbidden):
            consistency.delete_answer(answer.id, u3)
        assert Answer.objects.filter(pk=answer.id).exists()

    def test_delete_question_cascades_to_answers(self, question, u1, u2, u3):
        _answer(question, u2)
        _answer(question, u3)
        consistency.delete_question(question.id, u1)
        assert not Question.objects.filter(pk=question.id).exists()
        assert Answer.objects.count() == 0

    def test_non_author_cannot_delete_question(self, question, u2):
        _answer(question, u2)
        with pytest.raises(Forbidden):
            consistency.delete_question(question.id, u2)
        assert Answer.objects.count() == 1

    def test_delete_missing(self, u1):
        with pytest.raises(NotFound):
            consistency.delete_question(12345, u1)
        with pytest.raises(NotFound):
            consistency.delete_answer(12345, u1)


class TestRepairAnswerLinks:

    def test_reconciles_list_and_flags(self, question, u2, u3):
        first = _answer(question, u2)
        second = _answer(question, u3)
        Question.objects.filter(pk=question.pk).update(answer_ids=[second.id, 777, second.id])
        Answer.objects.filter(pk=first.pk).update(is_accepted=True)

        report = consistency.repair_answer_links(question)

        question.refresh_from_db()
        assert question.answer_ids == [second.id, first.id]
        assert report == {"removed": 2, "added": 1, "flags_cleared": 1}
        assert not Answer.objects.filter(is_accepted=True).exists()

    def test_consistent_question_is_untouched(self, question, u2):
        _answer(question, u2)
        report = consistency.repair_answer_links(question)
        assert report == {"removed": 0, "added": 0, "flags_cleared": 0}
