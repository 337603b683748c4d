from datetime import timedelta

import pytest
from django.http import QueryDict

from qa import queries
from qa.exceptions import InvalidInput
from qa.models import Answer, Question
from qa.queries import ListParams


@pytest.fixture
def many_questions(u1, u2):
    created = []
    for i in range(12):
        q = Question.objects.create(
            author=u1 if i % 2 else u2,
            title=f"Question number {i:02d}",
            description="About django" if i < 4 else "About flask",
        )
        q.set_tags(["python", "django"] if i < 4 else ["python"])
        created.append(q)
    return created


class TestParseListParams:

    def test_defaults(self):
        params = queries.parse_list_params(QueryDict(""))
        assert (params.page, params.limit, params.search, params.tags) == (1, 10, "", [])

    def test_reads_all_keys(self):
        params = queries.parse_list_params(
            QueryDict("page=2&limit=5&search=+loop+&tags=Python,django&tags=web&sortBy=title&sortOrder=ASC")
        )
        assert params.page == 2
        assert params.limit == 5
        assert params.search == "loop"
        assert params.tags == ["python", "django", "web"]
        assert params.sort == "title"
        assert params.sort_order == "asc"
        assert params.offset == 5

    def test_limit_is_capped(self):
        assert queries.parse_list_params({"limit": "500"}, max_limit=100).limit == 100

    @pytest.mark.parametrize("query", [{"page": "0"}, {"limit": "-3"}, {"page": "two"}])
    def test_rejects_bad_numbers(self, query):
        with pytest.raises(InvalidInput):
            queries.parse_list_params(query)


class TestQuestionListing:

    def test_pagination_window(self, many_questions):
        page = queries.list_questions(ListParams(page=2, limit=5))
        assert page.pagination == {"page": 2, "limit": 5, "total": 12, "totalPages": 3}
        newest_first = list(reversed(many_questions))
        assert [q.id for q in page.items] == [q.id for q in newest_first[5:10]]

    def test_page_past_the_end_is_empty(self, many_questions):
        page = queries.list_questions(ListParams(page=9, limit=5))
        assert page.items == []
        assert page.total == 12

    def test_empty_listing(self, db):
        page = queries.list_questions(ListParams())
        assert page.pagination == {"page": 1, "limit": 10, "total": 0, "totalPages": 0}

    def test_search_matches_title_or_description(self, many_questions):
        assert queries.list_questions(ListParams(search="DJANGO")).total == 4
        assert queries.list_questions(ListParams(search="number 11")).total == 1

    def test_tag_filter_any_match_without_duplicates(self, many_questions):
        page = queries.list_questions(ListParams(tags=["django", "python"], limit=50))
        assert page.total == 12
        assert len({q.id for q in page.items}) == 12

    def test_unknown_sort_falls_back_to_newest(self, many_questions):
        page = queries.list_questions(ListParams(sort="popularity", limit=3))
        assert page.items[0].id == many_questions[-1].id

    def test_field_sort_ascending(self, many_questions):
        page = queries.list_questions(ListParams(sort="title", sort_order="asc", limit=3))
        assert [q.title for q in page.items] == [
            "Question number 00", "Question number 01", "Question number 02",
        ]

    def test_by_author(self, many_questions, u1):
        page = queries.list_questions(ListParams(limit=50), author_id=u1.id)
        assert page.total == 6
        assert all(q.author_id == u1.id for q in page.items)


class TestAnswerListing:

    def test_relevance_order(self, question, u1, u2, u3):
        low = Answer.objects.create(content="a", author=u2, question=question, upvotes=1)
        high = Answer.objects.create(content="b", author=u3, question=question, upvotes=5)
        accepted = Answer.objects.create(content="c", author=u1, question=question, is_accepted=True)

        page = queries.list_answers(question, ListParams())
        assert [a.id for a in page.items] == [accepted.id, high.id, low.id]
        assert [a.id for a in queries.ordered_answers(question)] == [accepted.id, high.id, low.id]

    @pytest.fixture
    def voted(self, question, u1, u2, u3):
        older = Answer.objects.create(content="a", author=u2, question=question, upvotes=3, downvotes=2)
        newer = Answer.objects.create(content="b", author=u3, question=question, upvotes=3, downvotes=0)
        top = Answer.objects.create(content="c", author=u1, question=question, upvotes=7, downvotes=5)
        Answer.objects.filter(pk=older.pk).update(created_at=older.created_at - timedelta(minutes=10))
        return older, newer, top

    def test_votes_order_breaks_upvote_ties_by_downvotes(self, question, voted):
        older, newer, top = voted
        page = queries.list_answers(question, ListParams(sort="votes"))
        assert [a.id for a in page.items] == [top.id, newer.id, older.id]

    def test_newest_order(self, question, voted):
        older, newer, top = voted
        page = queries.list_answers(question, ListParams(sort="newest"))
        assert [a.id for a in page.items] == [top.id, newer.id, older.id]
        page = queries.list_answers(question, ListParams(sort="oldest"))
        assert [a.id for a in page.items] == [older.id, newer.id, top.id]

    def test_unknown_answer_sort_falls_back_to_relevance(self, question, voted):
        older, newer, top = voted
        Answer.objects.filter(pk=older.pk).update(is_accepted=True)
        page = queries.list_answers(question, ListParams(sort="controversial"))
        assert [a.id for a in page.items] == [older.id, top.id, newer.id]

    def test_user_answers_across_questions(self, question, u1, u2):
        other = Question.objects.create(author=u1, title="Another one", description="More text")
        Answer.objects.create(content="a", author=u2, question=question)
        Answer.objects.create(content="b", author=u2, question=other)
        Answer.objects.create(content="c", author=u1, question=other)

        page = queries.list_user_answers(u2.id, ListParams())
        assert page.total == 2
        assert {a.question_id for a in page.items} == {question.id, other.id}
