import json
import logging
from concurrent.futures import ThreadPoolExecutor

import pytest

import jtl
from jtl import (
    JTLParser,
    MalformedElementLine,
    MalformedEnvAssignment,
    MissingOrInvalidHeader,
    ParseException,
    ParserState,
    UndefinedEnvReference,
    UnexpectedDirective,
    UnterminatedSection,
)

SAMPLE_JTL = """DOCTYPE=JTL
>>>ENV;
>>>foo=bar;
>>>BEGIN;
>key="value">element_id>$env:foo;
>>>END;"""

TWO_ELEMENTS = """DOCTYPE=JTL
>>>ENV;
>>>site=example.org;
>>>BEGIN;
>lang="en">title>Welcome;
>href="https://$env:site">rel="home">link>$env:site;
>>>END;"""


def test_parses_single_element_with_env_reference():
    document = jtl.parse(SAMPLE_JTL)
    assert document.to_python() == [{"KEY": "element_id", "key": "value", "Content": "bar", "Contents": "bar"}]
    element = document[0]
    assert element.is_object()
    assert element["key"].as_string() == "value"


def test_undefined_env_reference_fails_whole_parse():
    with pytest.raises(UndefinedEnvReference) as excinfo:
        jtl.parse(SAMPLE_JTL.replace("$env:foo", "$env:baz"))
    assert excinfo.value.name == "baz"
    assert excinfo.value.line == 5


def test_two_elements_keep_order_and_independent_attributes():
    document = jtl.parse(TWO_ELEMENTS)
    assert [element.key for element in document] == ["title", "link"]
    assert document[0].attributes == {"lang": "en"}
    assert document[1].attributes == {"href": "https://$env:site", "rel": "home"}
    assert document[1].content == "example.org"


def test_missing_end_is_unterminated():
    with pytest.raises(UnterminatedSection) as excinfo:
        jtl.parse(SAMPLE_JTL.replace(">>>END;", ""))
    assert excinfo.value.state == "IN_BODY"


def test_begin_before_env_is_unexpected():
    text = "DOCTYPE=JTL\n>>>BEGIN;\n>>>ENV;\n>>>END;"
    with pytest.raises(UnexpectedDirective) as excinfo:
        jtl.parse(text)
    assert excinfo.value.state == "AWAITING_ENV"
    assert excinfo.value.statement == ">>>BEGIN"
    assert excinfo.value.line == 2


def test_missing_header():
    with pytest.raises(MissingOrInvalidHeader):
        jtl.parse(SAMPLE_JTL.replace("DOCTYPE=JTL", "DOCTYPE=XML"))


@pytest.mark.parametrize(
    "text",
    [
        "DOCTYPE=JTL\n>>>ENV;\n>>>ENV;\n>>>BEGIN;\n>>>END;",
        "DOCTYPE=JTL\n>>>ENV;\n>k>v;\n>>>BEGIN;\n>>>END;",
        "DOCTYPE=JTL\n>>>ENV;\n>>>END;",
        "DOCTYPE=JTL\n>>>ENV;\n>>>BEGIN;\n>>>BEGIN;\n>>>END;",
        "DOCTYPE=JTL\n>>>ENV;\n>>>BEGIN;\n>>>late=value;\n>>>END;",
        "DOCTYPE=JTL\n>>>ENV;\n>>>BEGIN;\n>>>END;\n>k>v;",
        "DOCTYPE=JTL\n>k>v;\n>>>ENV;\n>>>BEGIN;\n>>>END;",
        "DOCTYPE=JTL\n>>>ENV;\nfoo=bar;\n>>>BEGIN;\n>>>END;",
    ],
)
def test_statements_out_of_place(text):
    with pytest.raises(UnexpectedDirective):
        jtl.parse(text)


@pytest.mark.parametrize("assignment", [">>>foo", ">>>=bar", ">>>  =bar"])
def test_malformed_env_assignment(assignment):
    text = f"DOCTYPE=JTL\n>>>ENV;\n{assignment};\n>>>BEGIN;\n>>>END;"
    with pytest.raises(MalformedEnvAssignment):
        jtl.parse(text)


def test_malformed_element_aborts_parse():
    text = "DOCTYPE=JTL\n>>>ENV;\n>>>BEGIN;\n>ok>fine;\n>broken;\n>>>END;"
    with pytest.raises(MalformedElementLine) as excinfo:
        jtl.parse(text)
    assert excinfo.value.line == 5


def test_non_element_text_in_body_is_malformed():
    with pytest.raises(MalformedElementLine):
        jtl.parse("DOCTYPE=JTL\n>>>ENV;\n>>>BEGIN;\nplain text;\n>>>END;")


@pytest.mark.parametrize(
    "text",
    [
        "DOCTYPE=JTL",
        "DOCTYPE=JTL\n>>>ENV;",
        "DOCTYPE=JTL\n>>>ENV;\n>>>a=b;",
    ],
)
def test_unterminated_sections(text):
    with pytest.raises(UnterminatedSection):
        jtl.parse(text)


def test_all_errors_share_a_base_class():
    with pytest.raises(ParseException):
        jtl.parse("DOCTYPE=JTL")


def test_empty_env_and_body():
    assert len(jtl.parse("DOCTYPE=JTL\n>>>ENV;\n>>>BEGIN;\n>>>END;")) == 0


def test_env_values_are_trimmed_and_may_contain_equals():
    text = "DOCTYPE=JTL\n>>>ENV;\n>>> query = a=b ;\n>>>BEGIN;\n>k>$env:query;\n>>>END;"
    assert jtl.parse(text)[0].content == "a=b"


def test_env_redefinition_last_write_wins():
    text = "DOCTYPE=JTL\n>>>ENV;\n>>>foo=one;\n>>>foo=two;\n>>>BEGIN;\n>k>$env:foo;\n>>>END;"
    assert jtl.parse(text)[0].content == "two"


def test_duplicate_keys_are_not_merged():
    text = "DOCTYPE=JTL\n>>>ENV;\n>>>BEGIN;\n>a=\"1\">item>first;\n>a=\"2\">item>second;\n>>>END;"
    document = jtl.parse(text)
    assert [(e.key, e.content, e.attributes["a"]) for e in document] == [
        ("item", "first", "1"),
        ("item", "second", "2"),
    ]


def test_content_equals_contents_for_every_element():
    for element in jtl.parse(TWO_ELEMENTS):
        assert element["Content"] == element["Contents"]


def test_parsing_is_deterministic():
    assert jtl.parse(TWO_ELEMENTS) == jtl.parse(TWO_ELEMENTS)
    assert jtl.parse(TWO_ELEMENTS).to_python() == jtl.parse(TWO_ELEMENTS).to_python()


def test_several_statements_per_line_and_comments():
    text = "\n".join(
        [
            "DOCTYPE=JTL",
            "/* document metadata */",
            ">>>ENV; >>>who=world;",
            ">//> greeting below",
            ">>>BEGIN; >p>Hello; >p>$env:who;",
            ">>>END;",
        ]
    )
    assert [element.content for element in jtl.parse(text)] == ["Hello", "world"]


def test_parse_env():
    table = jtl.parse_env(SAMPLE_JTL)
    assert table.as_dict() == {"foo": "bar"}
    assert table.sealed


def test_parse_env_ignores_body_errors():
    text = SAMPLE_JTL.replace("$env:foo", "$env:baz").replace(">>>END;", "")
    assert jtl.parse_env(text)["foo"] == "bar"


def test_parse_env_requires_begin():
    with pytest.raises(UnterminatedSection) as excinfo:
        jtl.parse_env("DOCTYPE=JTL\n>>>ENV;\n>>>foo=bar;")
    assert excinfo.value.expected == ">>>BEGIN"


def test_stringify_round_trips_through_json():
    document = jtl.parse(TWO_ELEMENTS)
    assert json.loads(jtl.stringify(document)) == document.to_python()


def test_parser_instance_resets_between_calls():
    parser = JTLParser(SAMPLE_JTL)
    first = parser.parse_document()
    second = parser.parse_document()
    assert first == second
    assert len(second) == 1
    assert parser.state == ParserState.DONE


def test_concurrent_parses_do_not_interfere():
    documents = [SAMPLE_JTL.replace("bar", f"value-{i}") for i in range(20)]
    with ThreadPoolExecutor(max_workers=4) as pool:
        results = list(pool.map(jtl.parse, documents))
    assert [result[0].content for result in results] == [f"value-{i}" for i in range(20)]


def test_logging_when_enabled(caplog):
    with caplog.at_level(logging.DEBUG, logger="jtl.parser"):
        jtl.parse(SAMPLE_JTL, config={"enable_logger": True})
    messages = [record.getMessage() for record in caplog.records if record.name == "jtl.parser"]
    assert "Parsing JTL document" in messages
    assert "Transition IN_BODY -> DONE" in messages


def test_errors_are_logged_before_raising(caplog):
    with caplog.at_level(logging.ERROR, logger="jtl.parser"):
        with pytest.raises(UnterminatedSection):
            jtl.parse("DOCTYPE=JTL\n>>>ENV;", config={"enable_logger": True})
    assert any(record.levelno == logging.ERROR for record in caplog.records)


def test_silent_by_default(caplog):
    with caplog.at_level(logging.DEBUG):
        jtl.parse(SAMPLE_JTL)
    assert not [record for record in caplog.records if record.name.startswith("jtl")]


def test_log_level_is_per_parser(caplog):
    quiet = JTLParser(SAMPLE_JTL, config={"enable_logger": True, "log_level": logging.WARNING})
    verbose = JTLParser(SAMPLE_JTL, config={"enable_logger": True, "log_level": logging.DEBUG})
    with caplog.at_level(logging.DEBUG, logger="jtl.parser"):
        quiet.parse_document()
        assert not [record for record in caplog.records if record.name == "jtl.parser"]
        verbose.parse_document()
        emitted = len([record for record in caplog.records if record.name == "jtl.parser"])
        assert emitted > 0
        quiet.parse_document()
        assert len([record for record in caplog.records if record.name == "jtl.parser"]) == emitted
