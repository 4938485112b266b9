"""
Tests for template rendering
"""
import pytest

import logtail.core.renderer as renderer
from logtail.core.format_errors import MalformedTemplateError, PayloadDecodeError
from logtail.core.renderer import (RenderResult, RenderStatus, SkipReason,
                                   render, substitute)
from logtail.core.verbs import NormalizedTemplate, normalize

RECORD_TEMPLATE = "Record '%s' (%s) was inserted on page '%s' (%s)"
RECORD_PAYLOAD = (
    'a:4:{i:0;s:21:"Legal compliance Docs";i:1;s:15:"tx_dam_cat:9930";'
    'i:2;s:5:"Media";i:3;s:1:"1";}'
)


class TestRender:
    """Tests for render()"""

    def test_record_inserted_message(self):
        result = render(RECORD_TEMPLATE, RECORD_PAYLOAD)

        assert result.status == RenderStatus.RENDERED
        assert result.ok is True
        assert result.text == (
            "Record 'Legal compliance Docs' (tx_dam_cat:9930) was inserted on page 'Media' (1)"
        )

    def test_regular_string(self):
        """A template without verbs renders to itself"""
        result = render("Regular string", "")

        assert result.text == "Regular string"
        assert result.ok is True
        assert result.status == RenderStatus.SKIPPED
        assert result.reason == SkipReason.NO_PLACEHOLDERS
        assert result.error is None

    def test_payload_untouched_without_verbs(self, monkeypatch):
        """The payload is never decoded when nothing needs substituting"""
        def fail_decode(payload):
            raise AssertionError("payload should not be decoded")

        monkeypatch.setattr(renderer, "decode_payload", fail_decode)

        result = render("User logged in", "not even serialized")

        assert result.text == "User logged in"
        assert result.reason == SkipReason.NO_PLACEHOLDERS

    def test_malformed_template_returns_original(self):
        result = render("Done 100% now", RECORD_PAYLOAD)

        assert result.status == RenderStatus.FAILED
        assert result.ok is False
        assert result.text == "Done 100% now"
        assert isinstance(result.error, MalformedTemplateError)

    def test_undecodable_payload_returns_normalized_template(self):
        result = render("Value %d", "not serialized")

        assert result.status == RenderStatus.FAILED
        assert result.text == "Value %s"
        assert isinstance(result.error, PayloadDecodeError)

    @pytest.mark.parametrize(
        "payload",
        ["a:1:{a:0:{}i:0;}", "a:1:{i:0;" * 5000 + "N;" + "}" * 5000],
        ids=["array-key", "deep-nesting"],
    )
    def test_structurally_invalid_payload_fails_softly(self, payload):
        """Decoder errors other than ValueError still produce a failed result"""
        result = render("%s", payload)

        assert result.status == RenderStatus.FAILED
        assert result.text == "%s"
        assert isinstance(result.error, PayloadDecodeError)

    def test_payload_not_an_array(self):
        """A scalar payload leaves the placeholders visible"""
        result = render("Value %d", "i:5;")

        assert result.status == RenderStatus.SKIPPED
        assert result.reason == SkipReason.PAYLOAD_NOT_MAPPING
        assert result.text == "Value %s"
        assert result.error is None

    def test_too_few_values(self):
        result = render("%s and %s", 'a:1:{i:0;s:1:"x";}')

        assert result.status == RenderStatus.RENDERED
        assert result.text == "x and (missing)"

    def test_too_many_values(self):
        result = render("only %s", 'a:2:{i:0;s:1:"x";i:1;s:1:"y";}')

        assert result.text == "only x"

    def test_non_contiguous_indices(self):
        result = render("%s %s", 'a:2:{i:0;s:1:"a";i:2;s:1:"c";}')

        assert result.text == "a (missing)"

    def test_integer_and_null_values(self):
        result = render("uid=%d pid=%d title=%s", 'a:3:{i:0;i:17;i:1;N;i:2;s:4:"Home";}')

        assert result.text == "uid=17 pid=(null) title=Home"

    def test_string_keyed_values_are_appended(self):
        """String-keyed values come after indexed ones, sorted by key"""
        payload = 'a:3:{s:4:"user";s:5:"admin";i:0;s:5:"login";s:2:"ip";N;}'

        result = render("%s %s %s", payload)

        assert result.text == "login None admin"

    def test_width_is_applied(self):
        assert render("[%5d]", "a:1:{i:0;i:42;}").text == "[   42]"
        assert render("[%-5d]", "a:1:{i:0;i:42;}").text == "[42   ]"
        assert render("[%05d]", "a:1:{i:0;i:42;}").text == "[   42]"

    def test_precision_does_not_truncate(self):
        """Values are already text, so float precision is ignored"""
        assert render("%.2f", "a:1:{i:0;d:3.14159;}").text == "3.14159"

    def test_doubled_marker_consumes_one_value(self):
        assert render("100%%d", "a:1:{i:0;i:5;}").text == "1005"

    def test_unterminated_verb_stays_literal(self):
        assert render("%d at 50%", "a:2:{i:0;i:1;i:1;i:2;}").text == "1 at 50%"

    def test_result_serialization_excludes_error(self):
        result = render("Value %d", "not serialized")

        dumped = result.model_dump()
        assert dumped == {"status": RenderStatus.FAILED, "text": "Value %s", "reason": None}


class TestSubstitute:
    """Tests for substitute()"""

    def test_missing_marker_override(self):
        normalized = NormalizedTemplate(text="%s-%s", slots=2, verb_flags=("", ""))

        assert substitute(normalized, ["a"], missing="?") == "a-?"

    def test_missing_marker_from_settings(self, monkeypatch):
        monkeypatch.setenv("LOGTAIL_MISSING_VALUE_MARKER", "<none>")

        assert substitute(normalize("%s|%s"), ["a"]) == "a|<none>"

    def test_non_string_values_are_stringified(self):
        assert substitute(normalize("%s %s %s"), [None, 3, (1, 2)]) == "None 3 (1, 2)"

    @pytest.mark.parametrize(
        "flags, expected",
        [("10", "[         x]"), ("-3", "[x  ]"), ("[1]", "[x]"), ("*", "[x]"), ("+ #0", "[x]")],
    )
    def test_flags(self, flags, expected):
        normalized = NormalizedTemplate(text="[%s]", slots=1, verb_flags=(flags,))

        assert substitute(normalized, ["x"]) == expected


def test_result_helpers():
    assert RenderResult.rendered("x").status == RenderStatus.RENDERED
    assert RenderResult.skipped("x", SkipReason.NO_PLACEHOLDERS).ok is True
    assert RenderResult.failed("x", PayloadDecodeError("bad")).ok is False
