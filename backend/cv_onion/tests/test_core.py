import logging

import pytest
from pydantic import ValidationError

from cv_onion.core import (
    MAX_FILE_BYTES,
    AnalyzeCvInput,
    AnalyzeJobDescriptionInput,
    ColorCode,
    MatchCvToJobInput,
    MatchCvToJobOutput,
    color_for_score,
    decode_data_uri,
    encode_data_uri,
)
from cv_onion.exceptions import InvalidDataUriError

EXPECTED_COLORS = {
    0: ColorCode.RED,
    50: ColorCode.RED,
    51: ColorCode.ORANGE,
    75: ColorCode.ORANGE,
    76: ColorCode.GREEN,
    100: ColorCode.GREEN,
}


@pytest.mark.parametrize("score, color", sorted(EXPECTED_COLORS.items()))
def test_color_for_score_thresholds(score, color):
    assert color_for_score(score) is color


@pytest.mark.parametrize("score, color", sorted(EXPECTED_COLORS.items()))
def test_match_output_color_agrees_with_score(score, color):
    out = MatchCvToJobOutput(match_score=score, highlighted_cv="cv", color_code=color.value)
    assert out.color_code is color


def test_match_output_corrects_disagreeing_color(caplog):
    with caplog.at_level(logging.WARNING, logger="cv_onion.core"):
        out = MatchCvToJobOutput.model_validate(
            {"matchScore": 90, "highlightedCv": "cv", "colorCode": "red"}
        )
    assert out.color_code is ColorCode.GREEN
    assert "disagrees" in caplog.text


def test_match_output_rounds_fractional_score():
    out = MatchCvToJobOutput.model_validate(
        {"matchScore": 75.6, "highlightedCv": "cv", "colorCode": "green"}
    )
    assert out.match_score == 76
    assert out.color_code is ColorCode.GREEN


@pytest.mark.parametrize("score", [float("inf"), float("-inf"), float("nan")])
def test_match_output_rejects_non_finite_score(score):
    with pytest.raises(ValidationError):
        MatchCvToJobOutput(match_score=score, highlighted_cv="cv", color_code="red")


@pytest.mark.parametrize("score", [-1, 101])
def test_match_output_rejects_out_of_range_score(score):
    with pytest.raises(ValidationError):
        MatchCvToJobOutput(match_score=score, highlighted_cv="cv", color_code="red")


def test_match_output_rejects_unknown_color():
    with pytest.raises(ValidationError):
        MatchCvToJobOutput(match_score=10, highlighted_cv="cv", color_code="blue")


def test_wire_form_is_camel_case():
    out = MatchCvToJobOutput(match_score=60, highlighted_cv="cv", color_code="orange")
    assert out.model_dump(by_alias=True, mode="json") == {
        "matchScore": 60,
        "highlightedCv": "cv",
        "colorCode": "orange",
    }


def test_inputs_accept_either_field_name():
    a = MatchCvToJobInput.model_validate({"jobDescription": "jd", "cvContent": "cv"})
    b = MatchCvToJobInput(job_description="jd", cv_content="cv")
    assert a == b
    assert AnalyzeJobDescriptionInput.model_validate({"jobDescription": "jd"}).job_description == "jd"


def test_data_uri_encode_then_decode():
    uri = encode_data_uri(b"Jane Doe\n", "text/plain")
    assert uri == "data:text/plain;base64,SmFuZSBEb2UK"
    assert decode_data_uri(uri) == ("text/plain", b"Jane Doe\n")


def test_decode_data_uri_accepts_parameters():
    uri = "data:text/plain;charset=utf-8;base64,aGk="
    assert decode_data_uri(uri) == ("text/plain", b"hi")


@pytest.mark.parametrize(
    "uri",
    [
        "",
        "hello",
        "data:text/plain,aGk=",
        "data:;base64,aGk=",
        "data:text/plain;base64,***",
    ],
)
def test_decode_data_uri_rejects_malformed(uri):
    with pytest.raises(InvalidDataUriError):
        decode_data_uri(uri)


def test_analyze_cv_input_validates_data_uri():
    with pytest.raises(ValidationError):
        AnalyzeCvInput(cv_data_uri="not a data uri")
    ok = AnalyzeCvInput(cv_data_uri=encode_data_uri(b"%PDF-1.4", "application/pdf"))
    assert ok.cv_data_uri.startswith("data:application/pdf;base64,")


def test_analyze_cv_input_rejects_disallowed_media_type():
    with pytest.raises(ValidationError, match="Unsupported CV media type: image/png"):
        AnalyzeCvInput(cv_data_uri=encode_data_uri(b"\x89PNG", "image/png"))


def test_analyze_cv_input_size_limit():
    AnalyzeCvInput(cv_data_uri=encode_data_uri(b"x" * MAX_FILE_BYTES, "text/plain"))
    with pytest.raises(ValidationError, match="less than 5MB"):
        AnalyzeCvInput(cv_data_uri=encode_data_uri(b"x" * (MAX_FILE_BYTES + 1), "text/plain"))
