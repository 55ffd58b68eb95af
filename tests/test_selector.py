import pytest

from awake.errors import InvalidSelection, NoMatch, SelectionCancelled, SelectionExhausted
from awake.selector import ProcessSelector, is_numeric

from conftest import FakeProcessQuery, make_ref, scripted


@pytest.fixture
def npm_query():
    return FakeProcessQuery(
        processes=[
            make_ref(101, "node /usr/local/bin/npm run dev"),
            make_ref(202, "node /usr/local/bin/npm test"),
            make_ref(303, "python -m http.server 8000"),
        ]
    )


def test_is_numeric():
    assert is_numeric("12345")
    assert not is_numeric("12a")
    assert not is_numeric("")
    assert not is_numeric("-1")
    assert not is_numeric("١٢")  # non-ASCII digits are search terms


def test_single_match_resolves_without_prompting():
    query = FakeProcessQuery(processes=[make_ref(303, "python -m http.server 8000")])
    ask = scripted()

    ref = ProcessSelector(query, ask=ask).resolve("http.server")

    assert ref.pid == 303
    assert ask.prompts == []


def test_no_match_raises(capsys):
    query = FakeProcessQuery(processes=[make_ref(303, "python")])
    ask = scripted()

    with pytest.raises(NoMatch):
        ProcessSelector(query, ask=ask).resolve("ruby")

    assert ask.prompts == []
    assert "1)" not in capsys.readouterr().err


def test_ambiguous_match_lists_rows_on_stderr_and_selects_kth(npm_query, capsys):
    ask = scripted("2")

    ref = ProcessSelector(npm_query, ask=ask).resolve("npm")

    assert ref.pid == 202
    assert ask.prompts == [2]
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "Found 2 processes matching 'npm'" in captured.err
    assert "1)" in captured.err
    assert "2)" in captured.err
    assert "3)" not in captured.err
    assert captured.err.index("101") < captured.err.index("202")


def test_out_of_range_choice_reprompts_and_keeps_list(npm_query, capsys):
    ask = scripted("5", "0", "1")

    ref = ProcessSelector(npm_query, ask=ask).resolve("npm")

    assert ref.pid == 101
    assert ask.prompts == [2, 2, 2]
    assert "between 1 and 2" in capsys.readouterr().err
    assert npm_query.searches == ["npm"]


def test_blank_input_reprompts_without_searching(npm_query):
    ask = scripted("   ", "2")

    ref = ProcessSelector(npm_query, ask=ask).resolve("npm")

    assert ref.pid == 202
    assert npm_query.searches == ["npm"]


def test_text_input_runs_fresh_search(npm_query):
    ask = scripted("http")

    ref = ProcessSelector(npm_query, ask=ask).resolve("npm")

    # Not a filter of the npm list: the http server was not in it
    assert ref.pid == 303
    assert npm_query.searches == ["npm", "http"]


def test_failed_refinement_falls_back_to_previous_list(npm_query, capsys):
    ask = scripted("ruby", "1")

    ref = ProcessSelector(npm_query, ask=ask).resolve("npm")

    assert ref.pid == 101
    err = capsys.readouterr().err
    assert "No process found matching 'ruby'" in err
    assert "select from the previous list (1-2)" in err


def test_ambiguous_refinement_replaces_list():
    query = FakeProcessQuery(
        processes=[
            make_ref(1, "npm run a"),
            make_ref(2, "npm run b"),
            make_ref(3, "node one.js"),
            make_ref(4, "node two.js"),
            make_ref(5, "node three.js"),
        ]
    )
    ask = scripted("node", "3")

    ref = ProcessSelector(query, ask=ask).resolve("npm")

    assert ref.pid == 5
    assert ask.prompts == [2, 3]


def test_ctrl_c_at_prompt_cancels(npm_query):
    with pytest.raises(SelectionCancelled) as excinfo:
        ProcessSelector(npm_query, ask=scripted(KeyboardInterrupt)).resolve("npm")

    assert excinfo.value.exit_code == 0


def test_closed_input_exhausts_selection(npm_query):
    with pytest.raises(SelectionExhausted) as excinfo:
        ProcessSelector(npm_query, ask=scripted("9")).resolve("npm")

    assert excinfo.value.exit_code == 1


def test_choose_is_one_based():
    matches = [make_ref(1, "a"), make_ref(2, "b")]
    assert ProcessSelector.choose(matches, "1").pid == 1
    assert ProcessSelector.choose(matches, "2").pid == 2


def test_exhausted_selection_is_an_invalid_selection():
    error = SelectionExhausted(3)

    assert isinstance(error, InvalidSelection)
    assert error.count == 3
    assert error.choice is None
    assert str(error) == "No selection made (input closed)"
